"""Headless numpy RGB surface the game can draw onto (dashboard view, tests)."""
import numpy as np


class RasterSurface:
    def __init__(self, width, height):
        self.W, self.H = int(width), int(height)
        self.img = np.zeros((self.H, self.W, 3), dtype=np.uint8)

    def _clip(self, x0, y0, x1, y1):
        x0, x1 = max(0, int(round(x0))), min(self.W, int(round(x1)))
        y0, y1 = max(0, int(round(y0))), min(self.H, int(round(y1)))
        return x0, y0, x1, y1

    def fill_rect(self, x, y, w, h, color):
        x0, y0, x1, y1 = self._clip(x, y, x + w, y + h)
        if x0 < x1 and y0 < y1:
            self.img[y0:y1, x0:x1] = color

    def dashed_line(self, x0, y0, x1, y1, dash, color, width=1):
        # vertical or horizontal only; that is all the court needs
        on, off = dash
        half = width / 2
        if x0 == x1:
            top, bottom = sorted((y0, y1))
            y = top
            while y < bottom:
                self.fill_rect(x0 - half, y, width, min(on, bottom - y), color)
                y += on + off
        elif y0 == y1:
            left, right = sorted((x0, x1))
            x = left
            while x < right:
                self.fill_rect(x, y0 - half, min(on, right - x), width, color)
                x += on + off
        else:
            raise ValueError("dashed_line supports axis-aligned lines only")

    def fill_circle(self, cx, cy, r, color):
        x0, y0, x1, y1 = self._clip(cx - r, cy - r, cx + r + 1, cy + r + 1)
        if x0 >= x1 or y0 >= y1:
            return
        ys, xs = np.ogrid[y0:y1, x0:x1]
        mask = (xs - cx) ** 2 + (ys - cy) ** 2 <= r * r
        self.img[y0:y1, x0:x1][mask] = color

    def render_rgb(self, scale=1):
        img = self.img
        if scale != 1:
            img = np.repeat(np.repeat(img, scale, axis=0), scale, axis=1)
        return img.copy()
