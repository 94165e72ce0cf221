"""
VM16 SDK Command-Line Interface
===============================

This package provides command-line tools for the VM16 SDK:

- **vm16asm**: VM16 assembler

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["vm16asm"]
