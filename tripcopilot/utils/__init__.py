"""Shared helpers for the copilot service"""
