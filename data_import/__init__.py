"""Bulk data import for the Talent Allocation directory"""
