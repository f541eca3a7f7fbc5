from .network.protocol import Command, Frame, FrameParser

__all__ = ['Command', 'Frame', 'FrameParser']
