"""Tests for runtime and distrobox command construction."""

from pathlib import Path

from distrobox_backup.config import ToolConfig
from distrobox_backup.services import Toolchain, extract_loaded_image


class TestExtractLoadedImage:
    """Tests for extract_loaded_image."""

    def test_podman_output(self):
        """Test the image is found among podman's progress lines."""
        output = (
            "Getting image source signatures\n"
            "Copying blob 5f70bf18a086 done\n"
            "Loaded image: localhost/distrobox-backup-3f2a-1700000000:latest\n"
        )

        assert extract_loaded_image(output) == "localhost/distrobox-backup-3f2a-1700000000:latest"

    def test_older_podman_plural_marker(self):
        """Test the 'Loaded image(s):' form is recognized."""
        assert extract_loaded_image("Loaded image(s): localhost/box:latest\n") == (
            "localhost/box:latest"
        )

    def test_docker_untagged_image(self):
        """Test docker's 'Loaded image ID:' form is recognized."""
        assert extract_loaded_image("Loaded image ID: sha256:4f1e\n") == "sha256:4f1e"

    def test_marker_with_surrounding_noise(self):
        """Test a marker in the middle of a line still matches."""
        output = "time=\"2024\" level=info Loaded image: localhost/box:latest  \n"

        assert extract_loaded_image(output) == "localhost/box:latest"

    def test_missing_marker(self):
        """Test None is returned when no image is reported."""
        assert extract_loaded_image("Error: payload does not match\n") is None

    def test_empty_identifier_is_skipped(self):
        """Test a marker with nothing after it does not count."""
        assert extract_loaded_image("Loaded image:\nLoaded image ID: sha256:aa\n") == "sha256:aa"


class TestToolchain:
    """Tests for the argument vectors the toolchain issues."""

    def test_commit_stop_rmi(self, tool_config, fake_distrobox):
        """Test runtime commands go through the configured runtime."""
        toolchain = Toolchain(tool_config, fake_distrobox)

        toolchain.commit("dev", "img")
        toolchain.stop("dev")
        toolchain.remove_image("img")

        assert fake_distrobox.calls == [
            ("podman", "commit", "dev", "img"),
            ("podman", "stop", "dev"),
            ("podman", "rmi", "img"),
        ]

    def test_save_arguments(self, tool_config, fake_distrobox, tmp_path):
        """Test save writes to the given archive path."""
        fake_distrobox.images.add("img")
        target = tmp_path / "backup.tar"

        Toolchain(tool_config, fake_distrobox).save("img", target)

        assert fake_distrobox.calls == [("podman", "save", "-o", str(target), "img")]
        assert target.exists()

    def test_docker_runtime(self, user_home, fake_distrobox):
        """Test docker is used when configured."""
        fake_distrobox.runtime = "docker"
        config = ToolConfig(runtime="docker", user_home=user_home)

        Toolchain(config, fake_distrobox).load(Path("/tmp/in.tar"))

        assert fake_distrobox.calls == [("docker", "load", "-i", "/tmp/in.tar")]

    def test_create_standard(self, tool_config, fake_distrobox):
        """Test a standard container is created without --home."""
        fake_distrobox.images.add("img")

        Toolchain(tool_config, fake_distrobox).create("box", "img")

        assert fake_distrobox.calls == [("distrobox-create", "--name", "box", "--image", "img")]

    def test_create_isolated(self, tool_config, fake_distrobox, tmp_path):
        """Test an isolated container is created with --home."""
        fake_distrobox.images.add("img")
        home = tmp_path / "homes" / "box"

        Toolchain(tool_config, fake_distrobox).create("box", "img", home=home)

        assert fake_distrobox.calls == [
            ("distrobox-create", "--name", "box", "--image", "img", "--home", str(home))
        ]

    def test_force_remove(self, tool_config, fake_distrobox):
        """Test containers are removed with distrobox-rm --force."""
        Toolchain(tool_config, fake_distrobox).force_remove("dev")

        assert fake_distrobox.calls == [("distrobox-rm", "dev", "--force")]
        assert "dev" not in fake_distrobox.containers
