"""Normalizers turning raw listing text into canonical clinic fields."""
