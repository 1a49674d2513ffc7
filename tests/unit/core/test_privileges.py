"""Unit tests for the root privilege check."""

from unittest.mock import patch

import pytest
from mountctl.core.errors import PermissionDenied
from mountctl.core.privileges import require_root


class TestRequireRoot:
    """Tests for require_root."""

    def test_root(self) -> None:
        """UID 0 passes."""
        with patch("mountctl.core.privileges.os.geteuid", return_value=0):
            require_root()

    def test_non_root(self) -> None:
        """Any other UID is refused."""
        with (
            patch("mountctl.core.privileges.os.geteuid", return_value=1000),
            pytest.raises(PermissionDenied, match="root"),
        ):
            require_root()
