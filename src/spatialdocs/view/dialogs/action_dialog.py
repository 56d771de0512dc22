"""
Action Confirmation Prompt
Asks what to do after a tile was dropped on an action target.
"""
from typing import Optional

from PySide6.QtWidgets import QMessageBox, QWidget

from spatialdocs.controller.actions import ActionOutcome, PendingActionDrop


def ask_action_outcome(pending: PendingActionDrop, parent: Optional[QWidget] = None) -> ActionOutcome:
    box = QMessageBox(parent)
    box.setIcon(QMessageBox.Question)
    box.setWindowTitle("Confirm action")
    box.setText(f"Send '{pending.record_label}' to '{pending.action_label}'?")
    box.setInformativeText("Keep the document on the board, or remove it once the action is done.")

    cancel = box.addButton("Cancel", QMessageBox.RejectRole)
    keep = box.addButton("Confirm", QMessageBox.AcceptRole)
    remove = box.addButton("Confirm && Remove", QMessageBox.DestructiveRole)
    box.setDefaultButton(keep)
    box.setEscapeButton(cancel)
    box.exec()

    clicked = box.clickedButton()
    if clicked is remove:
        return ActionOutcome.CONFIRM_REMOVE
    if clicked is keep:
        return ActionOutcome.CONFIRM_KEEP
    return ActionOutcome.CANCEL
