"""Streamlit presentation layer for ShoreSquad.

Run with: streamlit run shoresquad/sandbox/app.py
"""
