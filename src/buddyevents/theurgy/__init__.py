"""
Theurgy - Command implementations for the BuddyEvents CLI.

- wallet: setup, balance, send, fund
"""
