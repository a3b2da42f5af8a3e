"""Cryptocat Bot Application Package.

A Telegram bot that reports the current BTC/USDT price and lets users refresh
the displayed quote in place with an inline button.

The application follows a modular architecture with separate concerns for:
- Command parsing and reply dispatch
- Button press (callback query) handling
- Quote fetching from the exchange API
- Long-poll retrieval shared by both handler loops
"""
