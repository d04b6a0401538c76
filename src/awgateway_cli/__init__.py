#!/usr/bin/env python3
"""A CLI for the awgateway library."""
