"""Telegram quote search bot."""
