"""Telegram bot implementation package.

Contains all Telegram specific functionality: the transport adapter, the
shared long-poll loop, the command dispatcher, the interaction poller and
the message templates used for replies.
"""
