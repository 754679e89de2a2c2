"""
Core FTP client logic.
Includes the control session engine, connection managers, parser and command handler.
"""

__all__ = [
    "ControlSession",
    "ControlConnectionManager",
    "DataConnectionManager",
    "ClientCommandHandler",
    "LineFramer",
    "Parser",
    "Reply",
    "Response",
    "ResponseAccumulator",
    "LoginState",
]

def __getattr__(name: str):
	if name == "ControlSession":
		from .session import ControlSession
		return ControlSession
	if name in ("ControlConnectionManager", "LineFramer"):
		from . import connection
		return getattr(connection, name)
	if name == "DataConnectionManager":
		from .data_connection import DataConnectionManager
		return DataConnectionManager
	if name == "ClientCommandHandler":
		from .commands import ClientCommandHandler
		return ClientCommandHandler
	if name in ("Parser", "Reply"):
		from . import parser
		return getattr(parser, name)
	if name in ("Response", "ResponseAccumulator"):
		from . import response
		return getattr(response, name)
	if name == "LoginState":
		from .handlers import LoginState
		return LoginState
	raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

def __dir__():
	return __all__
