"""Streamlit renderers for the individual lead wizard steps."""
