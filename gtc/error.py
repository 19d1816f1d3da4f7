#!/usr/bin/env python3
# -*- coding: utf-8 -*-
class GtcError(Exception):
    ''' Base class for all exceptions in the gtc package '''

class ConfigError(GtcError):
    ''' Exception raised when the configuration cannot be loaded or saved '''

class ChannelResolveError(GtcError):
    ''' Exception raised when no channel could be determined '''

class AuthError(GtcError):
    ''' Exception raised when the OAuth token exchange fails '''

class LoginError(GtcError):
    ''' Exception raised when the chat server rejects the login '''

class JoinError(GtcError):
    ''' Exception raised when the chat server rejects the channel join '''

class TransportError(GtcError):
    ''' Base class for all exceptions in the websocket transport '''

class ConnectionFailed(TransportError):
    ''' Exception raised when the connection to the server fails '''

class ConnectionClosed(TransportError):
    ''' Exception raised when the connection to the server is closed '''

class ProtocolError(TransportError):
    ''' Exception raised when the server sends a line that cannot be parsed '''
