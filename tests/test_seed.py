import pytest
import yaml

from shoresquad.shared.domain.seed import PACKAGED_SEED_PATH, SeedData, load_seed


def test_packaged_seed_contents():
    seed = load_seed()

    assert [c.name for c in seed.crews] == ["Ocean Warriors", "Beach Guardians", "Coastal Crusaders"]
    assert [c.id for c in seed.cleanups] == ["1", "2", "3"]
    assert seed.cleanups[0].plastic_target == 91
    assert seed.cleanups[0].location.as_pair() == (32.7597, -117.2483)
    assert len(seed.forecast) == 3
    assert seed.forecast[0].temp_c == 22


def test_packaged_seed_path_exists():
    assert PACKAGED_SEED_PATH.is_file()


def test_custom_seed_file(tmp_path):
    path = tmp_path / "seed.yaml"
    path.write_text(
        yaml.safe_dump({"crews": [{"id": 1, "name": "Tide Turners", "members": 4, "cleanups": 2}]}),
        encoding="utf-8",
    )

    seed = load_seed(path)

    assert seed.crews[0].id == "1"
    assert seed.crews[0].completed_cleanups == 2
    assert seed.cleanups == ()


def test_missing_seed_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_seed(tmp_path / "nope.yaml")


@pytest.mark.parametrize(
    "content",
    [
        "- a\n- b\n",
        "crews:\n  - {id: '1', name: Bad, members: -1}\n",
    ],
)
def test_invalid_seed_raises_value_error(tmp_path, content):
    path = tmp_path / "seed.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError):
        load_seed(path)


def test_empty_seed_data():
    assert SeedData.from_dict({}) == SeedData()
