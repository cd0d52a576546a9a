Q96_RESOLUTION = 96
Q96 = 1 << Q96_RESOLUTION
Q128 = 1 << 128
Q192 = 1 << 192
