# -*- coding: utf-8 -*-
"""
Project: 3D Maze
Author: Jihao Ye
Start Date: 11/21/2025

Brief Description:
    - Window, rendering and input for the maze in maze.py
    - Language: Python
    - Stack: pygame, PyOpenGL
"""

# Pylint notes:
# - We intentionally use wildcard imports from pygame.locals and PyOpenGL
#   for convenience in a real-time graphics script.
# - These modules are C extensions / dynamic, so pylint cannot reliably
#   see the symbols and reports them as undefined.
# For THIS file, we disable those specific checks.
# pylint: disable=wildcard-import, unused-wildcard-import, no-member, undefined-variable

import sys
import time
import logging
import argparse

import pygame
from pygame.locals import *

from OpenGL.GL import *
from OpenGL.GLU import *

from maze import (
    MAZE_SIZE,
    MAZE_COMPLEXITY,
    WALL_THICKNESS,
    Ball,
    MazeSession,
)


# -----------------------------
# Configuration
# -----------------------------
WINDOW_WIDTH = 1000
WINDOW_HEIGHT = 700

# World units per maze cell
CELL_SIZE = 2.0
WALL_HEIGHT = 1.0

FOV_Y = 60.0
NEAR_PLANE = 0.1
FAR_PLANE = 300.0

TARGET_FPS = 60

FLOOR_COLOR = (0.81, 0.85, 0.86)
WALL_COLOR = (0.38, 0.49, 0.55)
PLAYER_COLOR = (1.0, 0.34, 0.13)
EXIT_COLOR = (0.30, 0.69, 0.31)

ARROW_KEYS = {
    K_UP: "up",
    K_DOWN: "down",
    K_LEFT: "left",
    K_RIGHT: "right",
}


# -----------------------------
# Camera controller (view modes)
# -----------------------------
class CameraController:
    """
    CameraController manages different view modes:
        - overview: high view over the whole maze
        - third_p: behind and above the player
        - top_down: straight down at the player
    """

    MODES = ("overview", "third_p", "top_down")

    def __init__(self):
        self.mode = "overview"

    def apply(self, target_x, target_z, maze_size):
        """
        Sets the view matrix for the current mode; target is in world units
        """
        glLoadIdentity()

        if self.mode == "third_p":
            gluLookAt(target_x, 6.0, target_z + 6.0,
                      target_x, 0.0, target_z,
                      0.0, 1.0, 0.0)
        elif self.mode == "top_down":
            gluLookAt(target_x, 15.0, target_z,
                      target_x, 0.0, target_z,
                      0.0, 0.0, -1.0)
        else:
            extent = maze_size * CELL_SIZE
            center = extent / 2.0
            gluLookAt(extent * 0.7, extent * 1.2, extent * 0.7,
                      center, 0.0, center,
                      0.0, 1.0, 0.0)


# -----------------------------
# Maze renderer
# -----------------------------
class MazeRenderer:
    """
    Draws a generated maze: floor, one box per wall segment, exit marker
    """

    def draw(self, maze):
        extent = maze.size * CELL_SIZE

        glColor3f(*FLOOR_COLOR)
        glBegin(GL_QUADS)
        glVertex3f(0.0, 0.0, 0.0)
        glVertex3f(extent, 0.0, 0.0)
        glVertex3f(extent, 0.0, extent)
        glVertex3f(0.0, 0.0, extent)
        glEnd()

        glColor3f(*WALL_COLOR)
        for x0, z0, x1, z1 in maze.wall_segments():
            self._draw_wall(x0, z0, x1, z1)

        ex, ez = maze.exit
        glColor3f(*EXIT_COLOR)
        self._draw_box(ex + 0.1, ez + 0.1, ex + 0.9, ez + 0.9, 0.05)

    def _draw_wall(self, x0, z0, x1, z1):
        """
        Thicken an axis-aligned segment (cell units) into a box
        """
        half = WALL_THICKNESS / 2.0
        self._draw_box(x0 - half, z0 - half, x1 + half, z1 + half, WALL_HEIGHT)

    def _draw_box(self, x0, z0, x1, z1, height):
        """
        Draw the top and four sides of a box given in cell units
        """
        x0, z0 = x0 * CELL_SIZE, z0 * CELL_SIZE
        x1, z1 = x1 * CELL_SIZE, z1 * CELL_SIZE

        glBegin(GL_QUADS)
        # Top
        glVertex3f(x0, height, z0)
        glVertex3f(x1, height, z0)
        glVertex3f(x1, height, z1)
        glVertex3f(x0, height, z1)
        # Sides
        for (ax, az), (bx, bz) in (((x0, z0), (x1, z0)), ((x1, z0), (x1, z1)),
                                   ((x1, z1), (x0, z1)), ((x0, z1), (x0, z0))):
            glVertex3f(ax, 0.0, az)
            glVertex3f(bx, 0.0, bz)
            glVertex3f(bx, height, bz)
            glVertex3f(ax, height, az)
        glEnd()

    def draw_player(self, x, z, radius):
        """
        Player marker: a sphere at continuous cell position (x, z)
        """
        glColor3f(*PLAYER_COLOR)
        glPushMatrix()
        glTranslatef(x * CELL_SIZE, radius * CELL_SIZE, z * CELL_SIZE)
        quad = gluNewQuadric()
        gluSphere(quad, radius * CELL_SIZE, 16, 16)
        gluDeleteQuadric(quad)
        glPopMatrix()


# -----------------------------
# HUD
# -----------------------------
class Hud:
    """
    Text overlay drawn through a throwaway texture per line
    """

    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.font = pygame.font.SysFont("consolas", 20)

    def draw(self, lines):
        glMatrixMode(GL_PROJECTION)
        glPushMatrix()
        glLoadIdentity()
        glOrtho(0, self.width, self.height, 0, -1, 1)
        glMatrixMode(GL_MODELVIEW)
        glPushMatrix()
        glLoadIdentity()
        glDisable(GL_DEPTH_TEST)

        for i, text in enumerate(lines):
            if text:
                self._blit(10, 10 + 25 * i, text)

        glEnable(GL_DEPTH_TEST)
        glMatrixMode(GL_MODELVIEW)
        glPopMatrix()
        glMatrixMode(GL_PROJECTION)
        glPopMatrix()
        glMatrixMode(GL_MODELVIEW)

    def _blit(self, x, y, text):
        surface = self.font.render(text, True, (255, 255, 255))
        pixels = pygame.image.tostring(surface, "RGBA", False)
        w, h = surface.get_size()

        tex_id = glGenTextures(1)
        glBindTexture(GL_TEXTURE_2D, tex_id)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
        glTexImage2D(GL_TEXTURE_2D, 0, GL_RGBA, w, h, 0,
                     GL_RGBA, GL_UNSIGNED_BYTE, pixels)

        glEnable(GL_TEXTURE_2D)
        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
        glColor4f(1.0, 1.0, 1.0, 1.0)

        glBegin(GL_QUADS)
        for u, v in ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)):
            glTexCoord2f(u, v)
            glVertex2f(x + u * w, y + v * h)
        glEnd()

        glDisable(GL_BLEND)
        glDisable(GL_TEXTURE_2D)
        glBindTexture(GL_TEXTURE_2D, 0)
        glDeleteTextures([tex_id])


# -----------------------------
# Game (main loop + glue)
# -----------------------------
class Game:
    """
    Game ties together:
        - Window + OpenGL setup
        - MazeSession (maze, oracle, avatar), Ball, CameraController
        - Event handling, update, render loop
    Two movement modes: "avatar" steps a cell per arrow key,
    "ball" rolls continuously with WASD.
    """

    def __init__(self, size=MAZE_SIZE, complexity=MAZE_COMPLEXITY, seed=None,
                 mode="avatar", width=WINDOW_WIDTH, height=WINDOW_HEIGHT):
        pygame.init()
        pygame.display.set_caption("3D Maze")

        flags = DOUBLEBUF | OPENGL  # pylint: disable=unsupported-binary-operation
        pygame.display.set_mode((width, height), flags)
        self.width = width
        self.height = height
        self.running = True

        self.init_opengl()

        self.session = MazeSession(size, complexity, seed)
        self.ball = Ball(self.session.ball_start())
        self.mode = mode
        self.ball_solved = False

        self.camera = CameraController()
        self.renderer = MazeRenderer()
        self.hud = Hud(width, height)

        self.clock = pygame.time.Clock()
        self.start_time = time.time()
        self.elapsed_time = 0.0

    def init_opengl(self):
        """
        Configure basic OpenGL state.
        """
        glViewport(0, 0, self.width, self.height)
        glEnable(GL_DEPTH_TEST)

        glMatrixMode(GL_PROJECTION)
        glLoadIdentity()
        gluPerspective(FOV_Y, self.width / float(self.height), NEAR_PLANE, FAR_PLANE)

        glMatrixMode(GL_MODELVIEW)
        glLoadIdentity()

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == QUIT:
                self.running = False

            elif event.type == KEYDOWN:
                if event.key == K_ESCAPE:
                    self.running = False

                elif event.key in ARROW_KEYS and self.mode == "avatar":
                    was_solved = self.session.solved
                    self.session.step_named(ARROW_KEYS[event.key])
                    if self.session.solved and not was_solved:
                        self._announce_win(self.session.moves)

                elif event.key == K_TAB:
                    self.mode = "ball" if self.mode == "avatar" else "avatar"
                    print(f"Movement mode: {self.mode}")

                # Camera mode switching
                elif event.key in (K_1, K_2, K_3):
                    self.camera.mode = CameraController.MODES[event.key - K_1]
                    print(f"Camera mode: {self.camera.mode}")

                elif event.key == K_r:
                    self.restart()
                    print("Restarted from entrance")

                elif event.key == K_n:
                    self.regenerate()
                    print("Regenerated maze")

    def _announce_win(self, moves=None):
        if moves is None:
            print(f"You found the exit! ({self.elapsed_time:.1f}s)")
        else:
            print(f"You found the exit! ({moves} moves, {self.elapsed_time:.1f}s)")

    def restart(self):
        """
        Reset avatar and ball to the entrance and reset the timer.
        """
        self.session.restart()
        self.ball.set_position(*self.session.ball_start())
        self.ball_solved = False
        self.start_time = time.time()
        self.elapsed_time = 0.0

    def regenerate(self):
        """
        Create a new maze with the same parameters, then restart.
        """
        self.session.regenerate()
        self.restart()

    def update(self, dt):
        if self.mode == "ball":
            keys = pygame.key.get_pressed()
            dx = (1.0 if keys[K_d] else 0.0) - (1.0 if keys[K_a] else 0.0)
            dz = (1.0 if keys[K_s] else 0.0) - (1.0 if keys[K_w] else 0.0)
            self.ball.set_direction(dx, dz)
            self.ball.update(dt, self.session.oracle)

            if not self.ball_solved and self.ball.cell == self.session.maze.exit:
                self.ball_solved = True
                self._announce_win()

        self.elapsed_time = time.time() - self.start_time

    def _player_position(self):
        if self.mode == "ball":
            return self.ball.position[0], self.ball.position[1]
        x, z = self.session.position
        return x + 0.5, z + 0.5

    def draw_scene(self):
        glClearColor(0.08, 0.08, 0.12, 1.0)
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)

        px, pz = self._player_position()
        self.camera.apply(px * CELL_SIZE, pz * CELL_SIZE, self.session.size)

        self.renderer.draw(self.session.maze)
        self.renderer.draw_player(px, pz, self.ball.radius)

        total_seconds = int(self.elapsed_time)
        col, row = self.ball.cell if self.mode == "ball" else self.session.position
        self.hud.draw([
            f"Time: {total_seconds // 60:02d}:{total_seconds % 60:02d}",
            f"Cell: ({col}, {row})  Moves: {self.session.moves}",
            f"Mode: {self.mode}  [TAB] switch  [R] restart  [N] new maze",
        ])

    def run(self):
        """
        Main game loop
        """
        while self.running:
            dt = self.clock.tick(TARGET_FPS) / 1000.0

            self.handle_events()
            self.update(dt)
            self.draw_scene()

            pygame.display.flip()

        pygame.quit()


# -----------------------------
# Entry point
# -----------------------------
def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Walk or roll through a random 3D maze.")
    parser.add_argument("--size", type=int, default=MAZE_SIZE,
                        help="cells per side (default: %(default)s)")
    parser.add_argument("--complexity", type=float, default=MAZE_COMPLEXITY,
                        help="1 for a perfect maze, lower for extra shortcuts")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--mode", choices=("avatar", "ball"), default="avatar")
    parser.add_argument("--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    Game(args.size, args.complexity, args.seed, args.mode).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
