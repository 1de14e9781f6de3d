"""Scoring, coaching and chat services."""
