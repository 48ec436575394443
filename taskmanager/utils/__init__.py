"""
Utilities module for the Task Manager
Error taxonomy, logging helpers and time helpers shared by every layer
"""
