"""
The MODEL layer contains the grid and kernel data structures, noise injection
and file I/O. It has NO knowledge of plotting or of the command line.
"""
