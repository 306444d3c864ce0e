"""Reusable Streamlit widgets for the lead wizard."""
