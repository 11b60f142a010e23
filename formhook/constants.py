"""Constants shared across formhook."""

# Sent with every outbound request
USER_AGENT = "Formhook, a form submission dispatcher"

SEND_DATA_ERROR = "An error occurred during an attempt to send data to an external URL."

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Identifies the send data handler type in stored form definitions
SEND_DATA_HANDLER_TYPE_ID = "c76e8d1d-5df2-44cb-8fa2-85c32312d688"
