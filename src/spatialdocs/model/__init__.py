"""
The MODEL layer contains the board's data structures and geometry.
It has NO knowledge of widgets or painting; the only Qt it touches is the
QObject/Signal plumbing of the store and QSettings.
"""
