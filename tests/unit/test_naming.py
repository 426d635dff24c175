"""Unit tests for output path derivation."""

import pytest

from trackswitch.shell.naming import derive_output_path, split_extension, split_path


class TestDeriveOutputPath:
    """Test derive_output_path function."""

    def test_windows_path_with_language(self):
        """Test the Windows scenario with a tagged track."""
        result = derive_output_path(r"C:\videos\movie.mp4", 2, "eng")
        assert result == r"C:\videos\movie_track2_eng.mp4"

    def test_posix_path_without_language(self):
        """Test untagged tracks use the unknown sentinel."""
        result = derive_output_path("/home/u/clip.mkv", 0, "")
        assert result == "/home/u/clip_track0_unknown.mkv"

    def test_posix_path_none_language(self):
        """Test None language behaves like an empty one."""
        assert derive_output_path("/home/u/clip.mkv", 0) == "/home/u/clip_track0_unknown.mkv"

    def test_base_variant_omits_language(self):
        """Test the variant without a language suffix."""
        result = derive_output_path("/home/u/clip.mkv", 0, "eng", include_language=False)
        assert result == "/home/u/clip_track0.mkv"

    def test_custom_unknown_language(self):
        """Test the sentinel is configurable."""
        result = derive_output_path("/a/b.mp4", 1, None, unknown_language="und")
        assert result == "/a/b_track1_und.mp4"

    def test_mixed_separators_use_last(self):
        """Test whichever separator occurs last splits the path."""
        result = derive_output_path("C:/media\\films/movie.avi", 3, "fre")
        assert result == "C:/media\\films/movie_track3_fre.avi"

    def test_dots_in_directory_are_ignored(self):
        """Test only the filename's last dot splits the extension."""
        result = derive_output_path("/srv/v1.2/show.s01e01.mkv", 1, "jpn")
        assert result == "/srv/v1.2/show.s01e01_track1_jpn.mkv"

    def test_no_extension(self):
        """Test files without an extension."""
        assert derive_output_path("/tmp/video", 4, "eng") == "/tmp/video_track4_eng"

    def test_bare_filename(self):
        """Test a path without any directory."""
        assert derive_output_path("movie.webm", 0, "spa") == "movie_track0_spa.webm"

    @pytest.mark.parametrize(
        "path",
        [r"C:\videos\movie.mp4", "/home/u/clip.mkv", "noext", "/a/.hidden", "a.b.c.mov"],
    )
    @pytest.mark.parametrize("index", [0, 1, 17])
    @pytest.mark.parametrize("include_language", [True, False])
    def test_never_equals_input_and_keeps_directory_and_extension(
        self, path, index, include_language
    ):
        """Test the output differs from the input and keeps its location."""
        result = derive_output_path(path, index, "eng", include_language=include_language)

        assert result != path
        in_dir, in_name = split_path(path)
        out_dir, out_name = split_path(result)
        assert out_dir == in_dir
        assert split_extension(out_name)[1] == split_extension(in_name)[1]

    def test_deterministic(self):
        """Test identical inputs give identical outputs."""
        assert derive_output_path("/x/y.mp4", 2, "eng") == derive_output_path("/x/y.mp4", 2, "eng")


class TestSplitHelpers:
    """Test path splitting helpers."""

    def test_split_path_keeps_separator(self):
        assert split_path("/a/b/c.mkv") == ("/a/b/", "c.mkv")

    def test_split_path_backslash(self):
        assert split_path(r"D:\x\y.mp4") == ("D:\\x\\", "y.mp4")

    def test_split_extension_hidden_file(self):
        assert split_extension(".hidden") == ("", ".hidden")
