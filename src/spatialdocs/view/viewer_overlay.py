"""
Viewer Overlay Widget
Shows the pages of the viewed record above the board and animates them
between the tile and the reading stack. All geometry comes from the
ViewerController; this widget only paints it and reports image decoding and
animation completion back.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import (
    Qt, QRectF, QTimer, Property, QParallelAnimationGroup, QPropertyAnimation, QEasingCurve,
)
from PySide6.QtGui import QBrush, QColor, QFont, QImageReader, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QGraphicsObject, QGraphicsScene, QGraphicsView, QStyleOptionGraphicsItem, QWidget

from spatialdocs.config import TRANSITION_MS, ZOOM_STEP
from spatialdocs.controller.viewer import PageBox, ViewerController, ViewerPhase, ViewerState
from spatialdocs.model.geometry import Rect
from spatialdocs.model.records import PageKind

logger = logging.getLogger(__name__)


def _qrect(rect: Rect) -> QRectF:
    return QRectF(rect.left, rect.top, rect.width, rect.height)


class PageItem(QGraphicsObject):
    """A single page; its `rect` property is animatable."""

    def __init__(self, page: PageBox) -> None:
        super().__init__()
        self.index = page.index
        self._kind = page.source.kind
        self._text = page.source.content if page.source.kind is PageKind.TEXT else ""
        self._pixmap: Optional[QPixmap] = None
        self._rect = _qrect(page.rect)

    def _get_rect(self) -> QRectF:
        return QRectF(self._rect)

    def _set_rect(self, rect: QRectF) -> None:
        self.prepareGeometryChange()
        self._rect = QRectF(rect)
        self.update()

    rect = Property(QRectF, _get_rect, _set_rect)

    def set_pixmap(self, pixmap: QPixmap) -> None:
        self._pixmap = pixmap
        self.update()

    def boundingRect(self) -> QRectF:
        return self._rect.adjusted(-2.0, -2.0, 2.0, 2.0)

    def paint(self, painter: QPainter, option: QStyleOptionGraphicsItem, widget: Optional[QWidget] = None) -> None:
        painter.setRenderHint(QPainter.SmoothPixmapTransform)
        painter.setPen(QPen(QColor("#999999"), 1))
        painter.setBrush(QBrush(QColor("white")))
        painter.drawRect(self._rect)
        if self._pixmap is not None:
            painter.drawPixmap(self._rect, self._pixmap, QRectF(self._pixmap.rect()))
        elif self._kind is PageKind.TEXT:
            painter.setPen(QColor("#222222"))
            painter.setFont(QFont("Serif", max(int(self._rect.width() / 60), 6)))
            margin = self._rect.width() * 0.06
            painter.drawText(
                self._rect.adjusted(margin, margin, -margin, -margin),
                Qt.AlignLeft | Qt.AlignTop | Qt.TextWordWrap,
                self._text,
            )


class ViewerOverlay(QGraphicsView):
    def __init__(self, viewer: ViewerController, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.viewer = viewer
        self._scene = QGraphicsScene(self)
        self.setScene(self._scene)
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setBackgroundBrush(QBrush(QColor(20, 20, 20, 230)))
        self.setFrameShape(QGraphicsView.NoFrame)
        self.setRenderHint(QPainter.Antialiasing)

        self._items: list[PageItem] = []
        self._animation: Optional[QParallelAnimationGroup] = None
        self.hide()

        viewer.store.viewer_changed.connect(self._on_viewer_changed)

    def _on_viewer_changed(self, state: ViewerState) -> None:
        if state.phase is ViewerPhase.CLOSED:
            self._clear()
            self.hide()
            return

        if not self._items:
            self._build(state)
            return

        if state.animating:
            self._animate_to(state)
        else:
            self._stop_animation()
            for item, page in zip(self._items, state.pages):
                item.rect = _qrect(page.rect)
                item.setOpacity(page.opacity)
            self._update_scene_rect(state)

    # --- Opening ---

    def _build(self, state: ViewerState) -> None:
        self._scene.setSceneRect(0, 0, self.width(), self.height())
        for page in state.pages:
            item = PageItem(page)
            item.setZValue(len(state.pages) - page.index)  # first page on top of the pile
            self._scene.addItem(item)
            self._items.append(item)
        self.show()
        self.raise_()
        self.setFocus()
        # Decode after open() returns, one page per event loop turn
        for page in state.pages:
            if page.source.kind is PageKind.IMAGE:
                QTimer.singleShot(0, lambda p=page: self._load(p))

    def _load(self, page: PageBox) -> None:
        if page.index >= len(self._items):
            return
        reader = QImageReader(page.source.content)
        image = reader.read()
        if image.isNull():
            logger.warning(f"Could not decode '{page.source.content}': {reader.errorString()}")
            self.viewer.page_failed(page.index)
            return
        self._items[page.index].set_pixmap(QPixmap.fromImage(image))
        self.viewer.page_loaded(page.index, float(image.width()), float(image.height()))

    # --- Animation ---

    def _animate_to(self, state: ViewerState) -> None:
        self._stop_animation()
        # Closing targets the tile in widget coordinates; follow the scroll position
        origin = self.mapToScene(0, 0) if state.phase is ViewerPhase.CLOSING else None
        group = QParallelAnimationGroup(self)
        for item, page in zip(self._items, state.pages):
            target = _qrect(page.rect)
            if origin is not None:
                target.translate(origin)
            rect_anim = QPropertyAnimation(item, b"rect", group)
            rect_anim.setDuration(TRANSITION_MS)
            rect_anim.setEasingCurve(QEasingCurve.InOutCubic)
            rect_anim.setEndValue(target)
            group.addAnimation(rect_anim)

            fade = QPropertyAnimation(item, b"opacity", group)
            fade.setDuration(TRANSITION_MS)
            fade.setEndValue(page.opacity)
            group.addAnimation(fade)
        group.finished.connect(self.viewer.animation_finished)
        self._animation = group
        if state.phase is ViewerPhase.OPENING:
            self._update_scene_rect(state)
        group.start()

    def _stop_animation(self) -> None:
        if self._animation is not None:
            self._animation.stop()
            self._animation.deleteLater()
            self._animation = None

    def _update_scene_rect(self, state: ViewerState) -> None:
        width = max(state.content_width, float(self.width()))
        height = max(state.content_height, float(self.height()))
        self._scene.setSceneRect(0, 0, width, height)

    def _clear(self) -> None:
        self._stop_animation()
        for item in self._items:
            self._scene.removeItem(item)
            item.deleteLater()
        self._items.clear()

    # --- Keys ---

    def keyPressEvent(self, event) -> None:
        key = event.key()
        if key in (Qt.Key_Plus, Qt.Key_Equal):
            self.viewer.zoom(ZOOM_STEP)
        elif key == Qt.Key_Minus:
            self.viewer.zoom(-ZOOM_STEP)
        elif key in (Qt.Key_0, Qt.Key_W):
            self.viewer.fit_to_width()
        else:
            super().keyPressEvent(event)
            return
        event.accept()
