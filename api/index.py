"""
Vercel serverless entry point for the StoryVermo web edge.

Route every path here (see vercel.json) so the removed-URL gate sees all
traffic. The removed-path list is read from data/deleted_paths.json at cold
start; redeploy after editing it.
"""

import sys
import os

# Make the project root importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Vercel's @vercel/python runtime looks for a WSGI callable named `app`
from app import app  # noqa: E402,F401
