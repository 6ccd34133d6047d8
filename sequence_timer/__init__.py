"""Sequence Timer backend"""
