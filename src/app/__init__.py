"""NIGHTSHIFT service — HTTP surface over the shift controller."""
