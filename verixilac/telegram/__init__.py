"""Inline keyboards and recipient helpers for chat messages."""