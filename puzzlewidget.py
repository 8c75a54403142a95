# puzzlewidget.py

from PyQt5.QtWidgets import (
    QGraphicsView, QGraphicsScene, QGraphicsSimpleTextItem, QMenu
)
from PyQt5.QtCore import Qt, QPointF, QRectF, QTimer, pyqtSignal
from PyQt5.QtGui import QPen, QColor, QPainter
from PyQt5.QtWidgets import QGraphicsScene as QGS
from game import Game

REVEAL_MS = 3000                 # how long "Show Solution" stays up

EDGE_COLOR = QColor("#666666")
EDGE_CROSSING_COLOR = QColor("#ff4444")
EDGE_ACTIVE_COLOR = QColor("#4CAF50")
EDGE_BLOCKING_COLOR = QColor("#ff9f43")
NODE_FILL = QColor("#48dbfb")
NODE_FILL_DRAGGED = QColor("#feca57")
NODE_OUTLINE = QColor("#3498db")


class PuzzleWidget(QGraphicsView):
    levelChanged = pyqtSignal(int)
    levelCompleted = pyqtSignal(int)

    def __init__(self, game: Game, parent=None):
        super().__init__(parent)
        self.game = game
        scene = QGraphicsScene(self)
        scene.setItemIndexMethod(QGS.NoIndex)
        self.setScene(scene)

        self.setRenderHint(QPainter.Antialiasing)
        self.setDragMode(QGraphicsView.NoDrag)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setViewportUpdateMode(QGraphicsView.SmartViewportUpdate)
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)

        self.showLabels = True
        self._revealTimer = QTimer(self)
        self._revealTimer.setSingleShot(True)
        self._revealTimer.timeout.connect(self.hideSolution)

    # --------------------------
    # Canvas extent
    # --------------------------
    def canvasExtent(self) -> QPointF:
        vp = self.viewport().size()
        return QPointF(float(max(1, vp.width())), float(max(1, vp.height())))

    def resizeEvent(self, event):
        super().resizeEvent(event)
        ext = self.canvasExtent()
        self.scene().setSceneRect(QRectF(0.0, 0.0, ext.x(), ext.y()))
        self.game.resize(ext)
        self.updatePuzzleScene()

    # --------------------------
    # Level lifecycle
    # --------------------------
    def startGame(self):
        self.game.resize(self.canvasExtent())
        self.game.initialize()
        self._afterLevelChange()

    def newGame(self):
        self._revealTimer.stop()
        self.game.resize(self.canvasExtent())
        self.game.new_game()
        self._afterLevelChange()

    def restartLevel(self):
        self._revealTimer.stop()
        self.game.resize(self.canvasExtent())
        self.game.restart_level()
        self._afterLevelChange()

    def nextLevel(self):
        self._revealTimer.stop()
        self.game.resize(self.canvasExtent())
        self.game.next_level()
        self._afterLevelChange()

    def _afterLevelChange(self):
        self.updatePuzzleScene()
        self.levelChanged.emit(self.game.current_level)

    def showSolution(self) -> bool:
        if not self.game.show_solution():
            return False
        self.updatePuzzleScene()
        self._revealTimer.start(REVEAL_MS)
        return True

    def hideSolution(self):
        self.game.hide_solution()
        self.updatePuzzleScene()

    def toggleLabels(self):
        self.showLabels = not self.showLabels
        self.updatePuzzleScene()

    # --------------------------
    # Rendering
    # --------------------------
    def updatePuzzleScene(self):
        scene = self.scene()
        scene.clear()
        positions = {n.getId(): n.getPosition() for n in self.game.nodes}
        dragged = self.game.dragged_node_id
        # Edges in the way of the node being dragged
        blocking = set()
        if dragged is not None:
            blocking = {e.key() for e in self.game.crossings_for_node(dragged)}

        for edge in self.game.edges:
            p1 = positions[edge.getFrom()]
            p2 = positions[edge.getTo()]
            if edge.key() in blocking:
                pen = QPen(EDGE_BLOCKING_COLOR, 3)
            elif edge.isCrossing():
                pen = QPen(EDGE_CROSSING_COLOR, 3)
            elif dragged is not None and edge.touches(dragged):
                pen = QPen(EDGE_ACTIVE_COLOR, 3)
            else:
                pen = QPen(EDGE_COLOR, 2)
            pen.setCapStyle(Qt.RoundCap)
            item = scene.addLine(p1.x(), p1.y(), p2.x(), p2.y(), pen)
            item.setZValue(-10)

        outline = QPen(NODE_OUTLINE, 2)
        for n in self.game.nodes:
            pos, r = n.getPosition(), n.getRadius()
            fill = NODE_FILL_DRAGGED if n.isDragging() else NODE_FILL
            ellipse = scene.addEllipse(pos.x() - r, pos.y() - r, 2 * r, 2 * r, outline, fill)
            ellipse.setZValue(10)
            if self.showLabels:
                text = QGraphicsSimpleTextItem(str(n.getId() + 1))
                rect = text.boundingRect()
                text.setPos(pos.x() - rect.width() / 2, pos.y() - rect.height() / 2)
                text.setBrush(Qt.black)
                text.setZValue(20)
                scene.addItem(text)

        self.viewport().update()

    # --------------------------
    # Pointer input
    # --------------------------
    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            node_id = self.game.find_node_at(self.mapToScene(event.pos()))
            if node_id is not None and self.game.start_drag(node_id):
                self.setCursor(Qt.ClosedHandCursor)
                self.updatePuzzleScene()
                return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        node_id = self.game.dragged_node_id
        if node_id is not None:
            if self.game.drag(node_id, self.mapToScene(event.pos())):
                self.updatePuzzleScene()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        node_id = self.game.dragged_node_id
        if event.button() == Qt.LeftButton and node_id is not None:
            self.setCursor(Qt.ArrowCursor)
            solved = self.game.end_drag(node_id)
            self.updatePuzzleScene()
            if solved:
                self.levelCompleted.emit(self.game.current_level)
            return
        super().mouseReleaseEvent(event)

    def leaveEvent(self, event):
        # Pointer left the canvas mid-drag: drop the node where it is
        node_id = self.game.dragged_node_id
        if node_id is not None:
            self.setCursor(Qt.ArrowCursor)
            if self.game.end_drag(node_id):
                self.levelCompleted.emit(self.game.current_level)
            self.updatePuzzleScene()
        super().leaveEvent(event)

    def contextMenuEvent(self, event):
        menu = QMenu(self)
        menu.addAction("Show Solution (H)", self.showSolution)
        menu.addAction("Restart Level (R)", self.restartLevel)
        menu.addSeparator()
        menu.addAction("Toggle Labels (T)", self.toggleLabels)
        menu.exec_(event.globalPos())
