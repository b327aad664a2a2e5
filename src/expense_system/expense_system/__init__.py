"""Expense System package.

This package is organized by feature modules (users, categories, expenses, reports)
with a thin Flask controller layer and service/repository layers underneath.
"""
