"""Test helpers for the company resolver."""
