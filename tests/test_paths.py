from cue_importer.project_parser.paths import normalize_file_path, parse_spot_title


def test_file_url_becomes_a_path():
    assert normalize_file_path("file:///Users/editor/My%20Spot.prproj") == "/Users/editor/My Spot.prproj"


def test_smb_url_becomes_a_volume_path():
    assert normalize_file_path("smb://server/Projects/Spot.prproj") == "/Volumes/Projects/Spot.prproj"


def test_plain_paths_are_unchanged():
    assert normalize_file_path("/tmp/Spot.prproj") == "/tmp/Spot.prproj"


def test_spot_title_after_tv_marker():
    assert parse_spot_title("ACME_tv30_Big Game - v3") == "Big Game"


def test_spot_title_drops_delivery_suffix():
    assert parse_spot_title("ACME_edt_Summer Sale_final") == "Summer Sale"


def test_spot_title_after_short_prefix_codes():
    assert parse_spot_title("BRND_SPR_0412_Holiday_Rush_final") == "Holiday_Rush"


def test_spot_title_falls_back_to_name():
    assert parse_spot_title("Holiday") == "Holiday"
