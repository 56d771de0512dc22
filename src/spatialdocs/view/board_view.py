"""
Board View
Qt Graphics View rendering of the tiles, the action tray and the pointer
plumbing into the Board controller.

Scene coordinates are viewport pixels: the scene rect always matches the
widget, scroll bars are off, so a scene position is a board Point as-is.
"""
from __future__ import annotations

import logging
import random
from typing import Optional

from PySide6.QtCore import Qt, Signal, QRectF, QPointF, QParallelAnimationGroup, QPropertyAnimation, QEasingCurve
from PySide6.QtGui import QBrush, QColor, QPainter, QPen, QPixmap, QFont
from PySide6.QtWidgets import (
    QGraphicsView, QGraphicsScene, QGraphicsObject, QGraphicsRectItem, QGraphicsSimpleTextItem,
    QStyleOptionGraphicsItem, QWidget,
)

from spatialdocs.config import TRANSITION_MS, DRAG_Z
from spatialdocs.controller.board import Board
from spatialdocs.model.geometry import Point, Viewport
from spatialdocs.model.records import PageKind
from spatialdocs.model.tile import Tile

logger = logging.getLogger(__name__)

PILE_DEPTH = 3  # pages drawn in the pile preview
TRAY_Z = DRAG_Z - 1


class TileItem(QGraphicsObject):
    """One tile: a slightly messy pile of its first pages."""

    def __init__(self, tile: Tile) -> None:
        super().__init__()
        self.tile_id = tile.tile_id
        self._width = tile.record.width
        self._height = tile.record.height
        self._label = tile.record.label
        self._sources = tile.record.page_sources()[:PILE_DEPTH]
        self._pixmaps: list[Optional[QPixmap]] = []
        for source in self._sources:
            if source.kind is PageKind.IMAGE:
                pixmap = QPixmap(source.content)
                self._pixmaps.append(None if pixmap.isNull() else pixmap)
            else:
                self._pixmaps.append(None)
        # Small random tilt per page, fixed for the item's lifetime
        self._tilts = [random.uniform(-2.0, 2.0) for _ in self._sources]

        self.setTransformOriginPoint(self._width / 2.0, self._height / 2.0)
        self.setAcceptedMouseButtons(Qt.NoButton)  # the view routes the mouse
        self._animation: Optional[QParallelAnimationGroup] = None
        self._target: Optional[tuple[QPointF, float]] = None

    def boundingRect(self) -> QRectF:
        pad = 2.0 * PILE_DEPTH + 4.0
        return QRectF(-pad, -pad, self._width + 2 * pad, self._height + 2 * pad)

    def paint(self, painter: QPainter, option: QStyleOptionGraphicsItem, widget: Optional[QWidget] = None) -> None:
        painter.setRenderHint(QPainter.SmoothPixmapTransform)
        page_rect = QRectF(0.0, 0.0, self._width, self._height)
        if not self._sources:
            self._paint_blank(painter, page_rect)
            return

        # Back to front, first page on top
        for index in reversed(range(len(self._sources))):
            painter.save()
            offset = 2.0 * index
            painter.translate(self._width / 2.0 + offset, self._height / 2.0 + offset)
            painter.rotate(self._tilts[index])
            painter.translate(-self._width / 2.0, -self._height / 2.0)
            pixmap = self._pixmaps[index]
            if pixmap is not None:
                painter.drawPixmap(page_rect, pixmap, QRectF(pixmap.rect()))
                painter.setPen(QPen(QColor("#BBBBBB"), 1))
                painter.drawRect(page_rect)
            elif self._sources[index].kind is PageKind.TEXT:
                self._paint_text(painter, page_rect, self._sources[index].content)
            else:
                self._paint_blank(painter, page_rect)
            painter.restore()

    def _paint_blank(self, painter: QPainter, rect: QRectF) -> None:
        painter.setPen(QPen(QColor("#BBBBBB"), 1))
        painter.setBrush(QBrush(QColor("white")))
        painter.drawRect(rect)
        painter.setPen(QColor("#555555"))
        painter.drawText(rect.adjusted(8, 8, -8, -8), Qt.AlignCenter | Qt.TextWordWrap, self._label)

    def _paint_text(self, painter: QPainter, rect: QRectF, text: str) -> None:
        painter.setPen(QPen(QColor("#BBBBBB"), 1))
        painter.setBrush(QBrush(QColor("white")))
        painter.drawRect(rect)
        painter.setPen(QColor("#222222"))
        painter.setFont(QFont("Sans", 6))
        painter.drawText(rect.adjusted(8, 8, -8, -8), Qt.AlignLeft | Qt.AlignTop | Qt.TextWordWrap, text)

    # --- Sync from the model ---

    def sync(self, tile: Tile, on_finished) -> None:
        pos = QPointF(tile.anchor_left + tile.tx, tile.anchor_top + tile.ty)
        self.setVisible(not tile.hidden)
        self.setZValue(tile.z_order)

        if tile.transition:
            target = (pos, tile.scale)
            if self._animation is not None and self._target == target:
                return  # already heading there
            self._drop_animation()
            self._target = target
            group = QParallelAnimationGroup(self)
            for prop, value in ((b"pos", pos), (b"scale", tile.scale)):
                anim = QPropertyAnimation(self, prop, group)
                anim.setDuration(TRANSITION_MS)
                anim.setEasingCurve(QEasingCurve.OutCubic)
                anim.setEndValue(value)
                group.addAnimation(anim)
            group.finished.connect(lambda: on_finished(self.tile_id))
            self._animation = group
            group.start()
            return

        self._drop_animation()
        self._target = None
        self.setPos(pos)
        self.setScale(tile.scale)

    def _drop_animation(self) -> None:
        if self._animation is not None:
            self._animation.stop()
            self._animation.deleteLater()
            self._animation = None


class BoardView(QGraphicsView):
    """The interactive canvas."""
    resized = Signal(int, int)

    def __init__(self, board: Board, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.board = board
        self.store = board.store

        self._scene = QGraphicsScene(self)
        self.setScene(self._scene)
        self.setRenderHint(QPainter.Antialiasing)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setBackgroundBrush(QBrush(QColor("#F2F0EB")))
        self.setFrameShape(QGraphicsView.NoFrame)

        self._items: dict[int, TileItem] = {}
        self._tray_items: list[QGraphicsRectItem] = []

        self.store.tile_added.connect(self._on_tile_added)
        self.store.tile_removed.connect(self._on_tile_removed)
        self.store.tile_changed.connect(self._on_tile_changed)
        self.store.tray_changed.connect(self._on_tray_changed)

        for tile in self.store.tiles:
            self._on_tile_added(tile.tile_id)

    # --- Model -> scene ---

    def _on_tile_added(self, tile_id: int) -> None:
        tile = self.store.tiles.get(tile_id)
        if tile is None or tile_id in self._items:
            return
        item = TileItem(tile)
        self._scene.addItem(item)
        self._items[tile_id] = item
        item.sync(tile, self._on_animation_finished)

    def _on_tile_removed(self, tile_id: int) -> None:
        item = self._items.pop(tile_id, None)
        if item is not None:
            self._scene.removeItem(item)
            item.deleteLater()

    def _on_tile_changed(self, tile_id: int) -> None:
        tile = self.store.tiles.get(tile_id)
        item = self._items.get(tile_id)
        if tile is None or item is None:
            return
        item.sync(tile, self._on_animation_finished)

    def _on_animation_finished(self, tile_id: int) -> None:
        self.board.transitions.finish(tile_id)

    def _on_tray_changed(self, visible: bool) -> None:
        for item in self._tray_items:
            self._scene.removeItem(item)
        self._tray_items.clear()
        if not visible:
            return
        for target in self.board.actions.targets_for(self.board.drag.tile_id):
            rect_item = QGraphicsRectItem(target.rect.left, target.rect.top, target.rect.width, target.rect.height)
            rect_item.setBrush(QBrush(QColor(40, 40, 40, 200)))
            rect_item.setPen(QPen(Qt.NoPen))
            rect_item.setZValue(TRAY_Z)
            text = QGraphicsSimpleTextItem(target.label, rect_item)
            text.setBrush(QBrush(QColor("white")))
            bounds = text.boundingRect()
            text.setPos(
                target.rect.left + (target.rect.width - bounds.width()) / 2.0,
                target.rect.top + (target.rect.height - bounds.height()) / 2.0,
            )
            self._scene.addItem(rect_item)
            self._tray_items.append(rect_item)

    # --- Input -> controller ---

    def _tile_at(self, view_pos) -> Optional[int]:
        for item in self.items(view_pos):
            if isinstance(item, TileItem) and item.isVisible():
                return item.tile_id
        return None

    @staticmethod
    def _point(event) -> Point:
        pos = event.position()
        return Point(pos.x(), pos.y())

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.LeftButton:
            tile_id = self._tile_at(event.position().toPoint())
            if tile_id is not None and self.board.pointer_press(tile_id, self._point(event)):
                event.accept()
                return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:
        if self.board.pointer_move(self._point(event)):
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event) -> None:
        if event.button() == Qt.LeftButton and self.board.drag.session is not None:
            outcome = self.board.pointer_release(self._point(event))
            logger.debug(f"Release outcome: {outcome.value}")
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def mouseDoubleClickEvent(self, event) -> None:
        tile_id = self._tile_at(event.position().toPoint())
        if tile_id is not None:
            # The first click of the pair started a (zero-length) drag
            if self.board.drag.session is not None:
                self.board.pointer_release(self._point(event))
            self.board.double_activate(tile_id)
            event.accept()
            return
        super().mouseDoubleClickEvent(event)

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        size = event.size()
        self._scene.setSceneRect(0, 0, size.width(), size.height())
        self.board.resize(Viewport(float(size.width()), float(size.height())))
        self.resized.emit(size.width(), size.height())
