"""Data access layer for the trade journal.

This module provides the trade models and the repository that keeps trade
rows and account balances in step on Supabase.
"""
