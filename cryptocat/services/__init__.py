"""External API services package.

Contains the quote service that talks to the exchange price endpoint.
"""
