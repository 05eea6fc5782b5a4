"""
The VIEW layer draws grids with matplotlib. It only reads data.
"""
