"""Core functionality"""
