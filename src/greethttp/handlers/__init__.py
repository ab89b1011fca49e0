"""
=============================================================================
HANDLERS MODULE
=============================================================================

A handler takes a parsed HTTPRequest and returns an HTTPResponse. It holds
the application logic; everything about sockets and bytes stays outside.

    Request                 Handler                 Response
   ┌─────────┐           ┌─────────┐           ┌─────────┐
   │ GET     │           │         │           │ 200     │
   │ /greet/ │ ────────▶ │ Logic   │ ────────▶ │         │
   │ {id}    │           │         │           │ {...}   │
   └─────────┘           └─────────┘           └─────────┘

GreetHandler
   - "/"            HTML greeting
   - "/greet/{id}"  JSON or XML greeting for the configured student
   - anything else  404

=============================================================================
"""

from .greet import GreetHandler

__all__ = [
    "GreetHandler",
]
