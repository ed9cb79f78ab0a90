"""Material Design icons via QtAwesome."""
import qtawesome as qta

from mailbox_toolkit.gui.styles.theme import get_colors


class MaterialIcons:
    """Centralized Material Design icon definitions using QtAwesome."""

    # Navigation & Actions
    @staticmethod
    def folder_open():
        """Browse/Open folder icon."""
        return qta.icon('mdi6.folder-open-outline', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def refresh():
        """Reload/refresh icon."""
        return qta.icon('mdi6.refresh', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def file_pdf():
        """Generate document icon."""
        return qta.icon('mdi6.file-pdf-box', color=get_colors().TEXT_ON_PRIMARY)

    @staticmethod
    def plus(color=None):
        """Add/plus icon."""
        return qta.icon('mdi6.plus', color=color or get_colors().TEXT_ON_PRIMARY)

    @staticmethod
    def playlist_plus():
        """Add several apartments."""
        return qta.icon('mdi6.playlist-plus', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def pencil():
        """Edit icon."""
        return qta.icon('mdi6.pencil-outline', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def delete():
        """Clear/delete icon."""
        return qta.icon('mdi6.delete-outline', color=get_colors().ERROR)

    @staticmethod
    def arrow_up():
        return qta.icon('mdi6.arrow-up', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def arrow_down():
        return qta.icon('mdi6.arrow-down', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def drag():
        """Reorder mode icon."""
        return qta.icon('mdi6.drag-vertical', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def content_copy():
        """Copy icon."""
        return qta.icon('mdi6.content-copy', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def content_save(color=None):
        """Save icon."""
        return qta.icon('mdi6.content-save-outline', color=color or get_colors().TEXT_SECONDARY)

    @staticmethod
    def close():
        """Close/X icon."""
        return qta.icon('mdi6.close', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def logout():
        return qta.icon('mdi6.logout', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def settings(color=None):
        """Settings gear icon."""
        return qta.icon('mdi6.cog-outline', color=color or get_colors().TEXT_SECONDARY)
