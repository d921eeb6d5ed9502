"""
parity_net module: render/colors.py

Central color palette.
"""

BG = (14, 14, 18)
TEXT = (235, 235, 235)
DIM_TEXT = (150, 150, 160)

CONSTANT = (80, 120, 230)
WEIGHTED = (80, 210, 140)
OUTLINE = (30, 40, 40)

POS_WEIGHT = (90, 170, 130)
NEG_WEIGHT = (220, 90, 90)

CORRECT = (80, 210, 140)
WRONG = (220, 90, 90)
