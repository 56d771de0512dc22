"""
The VIEW layer renders the board with Qt Graphics View and forwards input
events to the controllers.
"""
