"""Result callbacks shipped with formhook."""
