"""HTTP API for the Talent Allocation matching service"""
