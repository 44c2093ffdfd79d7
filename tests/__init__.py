"""Tests for the EV Chargeulator integration."""
