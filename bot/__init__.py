"""
Bot Package
===========
Menu state machine, delete workflow and Telegram wiring.
"""
