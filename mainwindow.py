# mainwindow.py
from PyQt5.QtWidgets import (
    QMainWindow, QStatusBar, QAction, QFileDialog,
    QMessageBox, QDockWidget, QWidget, QVBoxLayout,
    QPushButton, QLabel, QGroupBox, QShortcut
)
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QKeySequence
from game import Game
from puzzlewidget import PuzzleWidget
from store import LevelStore


class MainWindow(QMainWindow):
    def __init__(self, store: LevelStore = None):
        super().__init__()
        self.setWindowTitle("Untangle")

        self.store = store if store is not None else LevelStore()
        self.puzzleWidget = PuzzleWidget(Game(self.puzzleWidgetExtentHint(), self.store), self)
        self.setCentralWidget(self.puzzleWidget)

        self.setStatusBar(QStatusBar(self))

        self.createActions()
        self.createMenuBar()
        self.createControlsDock()
        self.createShortcuts()

        self.puzzleWidget.levelChanged.connect(self.onLevelChanged)
        self.puzzleWidget.levelCompleted.connect(self.onLevelCompleted)

    @staticmethod
    def puzzleWidgetExtentHint():
        return (800.0, 600.0)

    def createActions(self):
        self.newAction = QAction("&New Game", self, triggered=self.confirmNewGame)
        self.restartAction = QAction("&Restart Level", self, triggered=self.puzzleWidget.restartLevel)
        self.nextAction = QAction("Ne&xt Level", self, triggered=self.nextLevel)
        self.solveAction = QAction("Show &Solution", self, triggered=self.showSolution)
        self.saveAction = QAction("&Save Game", self, triggered=self.saveGame)
        self.loadAction = QAction("&Load Game", self, triggered=self.loadGame)
        self.infoAction = QAction("Level &Info", self, triggered=self.showLevelInfo)
        self.toggleLabelsAction = QAction("&Toggle Node Labels", self, triggered=self.puzzleWidget.toggleLabels)
        self.nextAction.setEnabled(False)

    def createMenuBar(self):
        menuBar = self.menuBar()

        fileMenu = menuBar.addMenu("&File")
        fileMenu.addAction(self.newAction)
        fileMenu.addAction(self.saveAction)
        fileMenu.addAction(self.loadAction)

        gameMenu = menuBar.addMenu("&Game")
        gameMenu.addAction(self.restartAction)
        gameMenu.addAction(self.nextAction)
        gameMenu.addSeparator()
        gameMenu.addAction(self.solveAction)
        gameMenu.addAction(self.infoAction)

        viewMenu = menuBar.addMenu("&View")
        viewMenu.addAction(self.toggleLabelsAction)

    def createControlsDock(self):
        dock = QDockWidget("Controls", self)
        dock.setAllowedAreas(Qt.RightDockWidgetArea)

        mainControlsWidget = QWidget()
        mainLayout = QVBoxLayout(mainControlsWidget)
        mainLayout.setAlignment(Qt.AlignTop)

        self.levelLabel = QLabel("Level 1")
        self.paramsLabel = QLabel("")

        gameGroup = QGroupBox("Game")
        gameLayout = QVBoxLayout()
        btn_restart = QPushButton("Restart Level (R)")
        btn_solve = QPushButton("Show Solution (H)")
        self.btnNext = QPushButton("Next Level (Enter)")
        self.btnNext.setEnabled(False)
        btn_new = QPushButton("New Game (N)")
        gameLayout.addWidget(btn_restart)
        gameLayout.addWidget(btn_solve)
        gameLayout.addWidget(self.btnNext)
        gameLayout.addWidget(btn_new)
        gameGroup.setLayout(gameLayout)

        mainLayout.addWidget(self.levelLabel)
        mainLayout.addWidget(self.paramsLabel)
        mainLayout.addSpacing(10)
        mainLayout.addWidget(gameGroup)

        dock.setWidget(mainControlsWidget)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)

        btn_restart.clicked.connect(self.restartAction.trigger)
        btn_solve.clicked.connect(self.solveAction.trigger)
        self.btnNext.clicked.connect(self.nextAction.trigger)
        btn_new.clicked.connect(self.newAction.trigger)

    def createShortcuts(self):
        QShortcut(QKeySequence("N"), self, self.newAction.trigger)
        QShortcut(QKeySequence("R"), self, self.restartAction.trigger)
        QShortcut(QKeySequence("H"), self, self.solveAction.trigger)
        QShortcut(QKeySequence(Qt.Key_Return), self, self.nextAction.trigger)
        QShortcut(QKeySequence("Ctrl+S"), self, self.saveAction.trigger)
        QShortcut(QKeySequence("Ctrl+O"), self, self.loadAction.trigger)
        QShortcut(QKeySequence("T"), self, self.toggleLabelsAction.trigger)
        QShortcut(QKeySequence("I"), self, self.infoAction.trigger)

    def showEvent(self, event):
        super().showEvent(event)
        if not self.puzzleWidget.game.nodes:
            self.puzzleWidget.startGame()

    # --------------------------
    # Slots
    # --------------------------
    def onLevelChanged(self, level: int):
        params = self.puzzleWidget.game.parameters
        self.levelLabel.setText(f"Level {level}")
        self.paramsLabel.setText(f"{params.node_count} nodes, degree {params.target_degree}")
        completed = self.puzzleWidget.game.is_completed
        self.nextAction.setEnabled(completed)
        self.btnNext.setEnabled(completed)

    def onLevelCompleted(self, level: int):
        self.nextAction.setEnabled(True)
        self.btnNext.setEnabled(True)
        self.statusBar().showMessage(f"Level {level} solved! No crossings left.", 6000)

    def nextLevel(self):
        if self.puzzleWidget.game.is_completed:
            self.puzzleWidget.nextLevel()

    def confirmNewGame(self):
        reply = QMessageBox.question(
            self, "New Game",
            "Start over from level 1? All generated levels will be discarded.",
            QMessageBox.Yes | QMessageBox.No, QMessageBox.No
        )
        if reply == QMessageBox.Yes:
            self.puzzleWidget.newGame()

    def showSolution(self):
        if not self.puzzleWidget.showSolution():
            self.statusBar().showMessage("No solution available for this level.", 4000)

    def saveGame(self):
        path, _ = QFileDialog.getSaveFileName(self, "Save Game", "", "JSON Files (*.json)")
        if path:
            if self.store.save_to_json(path):
                self.statusBar().showMessage(f"Game saved to {path}", 5000)
            else:
                QMessageBox.warning(self, "Error", "Could not save the game.")

    def loadGame(self):
        path, _ = QFileDialog.getOpenFileName(self, "Load Game", "", "JSON Files (*.json)")
        if path:
            if self.store.load_from_json(path):
                self.puzzleWidget.startGame()
                self.statusBar().showMessage(f"Game loaded from {path}", 5000)
            else:
                QMessageBox.warning(self, "Error", "Could not load the game.")

    def showLevelInfo(self):
        stats = self.puzzleWidget.game.get_stats()
        self.statusBar().showMessage(
            f"Level {stats['level']}: nodes={stats['nodes']}, edges={stats['edges']}, "
            f"target degree={stats['target_degree']}, crossings={stats['crossings']}",
            6000
        )
