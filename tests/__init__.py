"""
Channelframe test suite.
"""
