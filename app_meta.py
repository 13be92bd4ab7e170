# app_meta.py
from __future__ import annotations

APP_NAME = "bundlebay"

# Ports created by the host application are named "<program>:<port>".
PROGRAM_NAME = "Ardour"
