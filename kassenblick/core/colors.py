"""Skin colour strings (R,G,B,A)."""


class COLOR:
    GREY = "128,128,128,255"
    YELLOW = "255,255,0,255"
    RED = "255,0,0,255"
    GREEN = "0,255,0,255"
    BLACK = "0,0,0,255"
    WHITE = "255,255,255,255"
    ORANGE = "255,165,0,255"
    TRANSPARENT = "0,0,0,0"
