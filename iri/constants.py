import logging


ENCODING = "utf-8"
ROOT = "/"


def debug(msg_maybe_lambda):
    """
    Write the given message to the debug log.
    Pass `lambda: msg` in case the message is computationally intensive to format.
    """

    if logging.getLogger().isEnabledFor(logging.DEBUG):
        if callable(msg_maybe_lambda):
            logging.debug(msg_maybe_lambda())
        else:
            logging.debug(msg_maybe_lambda)
