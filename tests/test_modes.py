from __future__ import annotations

import pytest

from double_slit.modes import MODE_CYCLE, MODE_INFO, Mode


@pytest.mark.parametrize("raw, expected", [
    ("wave", Mode.WAVE),
    ("light", Mode.WAVE),
    ("particle", Mode.CLASSICAL_PARTICLE),
    ("classicalParticle", Mode.CLASSICAL_PARTICLE),
    ("electron", Mode.ELECTRON_BEAM),
    ("electronBeam", Mode.ELECTRON_BEAM),
    ("single", Mode.SINGLE_ELECTRON),
    ("SINGLE_ELECTRON", Mode.SINGLE_ELECTRON),
    (Mode.ELECTRON_BEAM, Mode.ELECTRON_BEAM),
])
def test_parse_accepts_names_and_aliases(raw, expected) -> None:
    assert Mode.parse(raw) is expected


@pytest.mark.parametrize("raw", ["", "photon", None, 3])
def test_parse_rejects_unknown(raw) -> None:
    with pytest.raises(ValueError):
        Mode.parse(raw)


def test_observer_capability_only_for_electrons() -> None:
    assert [m for m in Mode if m.has_observer] == [Mode.ELECTRON_BEAM, Mode.SINGLE_ELECTRON]
    assert not Mode.WAVE.has_particles
    assert all(m.has_particles for m in MODE_CYCLE[1:])


def test_every_mode_has_display_info() -> None:
    assert set(MODE_INFO) == set(Mode)
    for mode in Mode:
        assert mode.info.title
        assert mode.info.color.startswith("#")
