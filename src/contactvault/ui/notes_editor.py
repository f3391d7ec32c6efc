"""Notes form used as the default external editor of the shell.

Run as `python -m contactvault.ui.notes_editor --title TITLE`. Reads one
escaped line from stdin, shows it in an editable dialog, and on Save
prints the escaped text and exits 0. Closing or cancelling exits 1.
"""
import argparse
import sys

try:
    from PyQt6 import QtWidgets, QtGui
except ImportError:
    print("[!] PyQt6 not installed. pip install PyQt6", file=sys.stderr)
    sys.exit(2)

from contactvault.utils.editor import escape_newlines, unescape_newlines


class NotesEditor(QtWidgets.QDialog):
    def __init__(self, title: str, text: str, parent=None):
        super().__init__(parent)
        self.setWindowTitle(f"Notes - {title}")
        self.resize(700, 500)

        layout = QtWidgets.QVBoxLayout(self)

        self.text_edit = QtWidgets.QPlainTextEdit()
        self.text_edit.setFont(QtGui.QFont("Consolas", 10))
        self.text_edit.setPlainText(text)
        layout.addWidget(self.text_edit)

        btn_layout = QtWidgets.QHBoxLayout()

        save_btn = QtWidgets.QPushButton("Save")
        save_btn.clicked.connect(self.accept)
        btn_layout.addWidget(save_btn)

        cancel_btn = QtWidgets.QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        btn_layout.addWidget(cancel_btn)

        layout.addLayout(btn_layout)
        self.original_content = text

    def text(self) -> str:
        return self.text_edit.toPlainText()

    def reject(self):
        if self.text() != self.original_content:
            reply = QtWidgets.QMessageBox.question(
                self,
                "Discard Changes?",
                "The notes have been modified. Discard the changes?",
                QtWidgets.QMessageBox.StandardButton.Discard |
                QtWidgets.QMessageBox.StandardButton.Cancel
            )
            if reply != QtWidgets.QMessageBox.StandardButton.Discard:
                return
        super().reject()


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Edit a multi-line text field")
    p.add_argument("--title", default="Notes", help="Form title")
    args = p.parse_args(argv)

    seed = unescape_newlines(sys.stdin.readline().rstrip("\n"))

    app = QtWidgets.QApplication(sys.argv[:1])
    dlg = NotesEditor(args.title, seed)
    if dlg.exec() != QtWidgets.QDialog.DialogCode.Accepted:
        print("cancelled by user", file=sys.stderr)
        return 1
    sys.stdout.write(escape_newlines(dlg.text()) + "\n")
    sys.stdout.flush()
    app.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
