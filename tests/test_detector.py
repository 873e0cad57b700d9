import json

import pytest

from formfitness.detector import (
    OpenPoseJsonDetector, apply_orientation, keypoint_path_for, parse_openpose_people,
)
from formfitness.models import Joint, Orientation, PixelBuffer, Size


def keypoints(*triples):
    flat = []
    for triple in triples:
        flat.extend(triple)
    return flat


def openpose_json(*people):
    return {"version": 1.3, "people": [{"pose_keypoints_2d": p} for p in people]}


SIZE = Size(200, 100)


def test_parse_normalizes_and_flips_y():
    data = openpose_json(keypoints((50, 25, 0.9), (100, 50, 0.8)))
    skeleton = parse_openpose_people(data, SIZE)[0]

    nose = skeleton.require(Joint.NOSE)
    assert (nose.x, nose.y, nose.confidence) == pytest.approx((0.25, 0.75, 0.9))
    assert skeleton.require(Joint.NECK).location == pytest.approx((0.5, 0.5))


def test_parse_maps_body25_order():
    triples = [(10 * i, 5 * i, 0.9) for i in range(25)]
    skeleton = parse_openpose_people(openpose_json(keypoints(*triples)), SIZE)[0]

    assert len(skeleton) == 15
    assert skeleton.require(Joint.RIGHT_WRIST).x == pytest.approx(40 / 200)
    assert skeleton.require(Joint.LEFT_WRIST).x == pytest.approx(70 / 200)
    assert skeleton.require(Joint.LEFT_ANKLE).x == pytest.approx(140 / 200)


def test_parse_skips_undetected_keypoints():
    data = openpose_json(keypoints((50, 25, 0.9), (0, 0, 0.0), (30, 30, 0.05)))
    skeleton = parse_openpose_people(data, SIZE)[0]

    assert Joint.NECK not in skeleton
    # 0.05는 보관되지만 게이트에서 걸러짐
    assert skeleton.point(Joint.RIGHT_SHOULDER) is None


def test_parse_multiple_people():
    data = openpose_json(keypoints((50, 25, 0.9)), keypoints((150, 75, 0.9)))
    people = parse_openpose_people(data, SIZE)
    assert len(people) == 2
    assert people[1].require(Joint.NOSE).location == pytest.approx((0.75, 0.25))


def test_parse_rejects_empty_size():
    with pytest.raises(ValueError):
        parse_openpose_people(openpose_json([]), Size(0, 0))


@pytest.mark.parametrize("orientation, expected", [
    (Orientation.UP, (0.2, 0.3)),
    (Orientation.UP_MIRRORED, (0.8, 0.3)),
    (Orientation.DOWN, (0.8, 0.7)),
    (Orientation.DOWN_MIRRORED, (0.2, 0.7)),
])
def test_apply_orientation(orientation, expected):
    assert apply_orientation(0.2, 0.3, orientation) == pytest.approx(expected)


def test_keypoint_path_for(tmp_path):
    assert keypoint_path_for(tmp_path / "squats.png") == tmp_path / "squats_keypoints.json"
    sidecar = tmp_path / "frame_000001_keypoints.json"
    assert keypoint_path_for(sidecar) == sidecar


def test_detect_reads_sidecar_file(tmp_path):
    image = tmp_path / "squats.png"
    data = openpose_json(keypoints((32, 12, 0.9), (32, 24, 0.9)))
    (tmp_path / "squats_keypoints.json").write_text(json.dumps(data), encoding="utf-8")

    buffer = PixelBuffer.blank(64, 48, image)
    skeleton = OpenPoseJsonDetector().detect(buffer)

    assert skeleton.require(Joint.NOSE).location == pytest.approx((0.5, 0.75))
    assert skeleton.require(Joint.NECK).location == pytest.approx((0.5, 0.5))


def test_detect_applies_orientation(tmp_path):
    image = tmp_path / "frame.png"
    data = openpose_json(keypoints((16, 12, 0.9)))
    (tmp_path / "frame_keypoints.json").write_text(json.dumps(data), encoding="utf-8")

    skeleton = OpenPoseJsonDetector().detect(PixelBuffer.blank(64, 48, image), Orientation.UP_MIRRORED)
    assert skeleton.require(Joint.NOSE).x == pytest.approx(0.75)


def test_detect_without_source_returns_none():
    assert OpenPoseJsonDetector().detect(PixelBuffer.blank(64, 48)) is None


def test_detect_missing_file_returns_none(tmp_path):
    buffer = PixelBuffer.blank(64, 48, tmp_path / "missing.png")
    assert OpenPoseJsonDetector().detect(buffer) is None


def test_detect_bad_json_returns_none(tmp_path):
    (tmp_path / "broken_keypoints.json").write_text("{not json", encoding="utf-8")
    buffer = PixelBuffer.blank(64, 48, tmp_path / "broken.png")
    assert OpenPoseJsonDetector().detect(buffer) is None


def test_detect_missing_person_returns_none(tmp_path):
    (tmp_path / "empty_keypoints.json").write_text(json.dumps(openpose_json()), encoding="utf-8")
    buffer = PixelBuffer.blank(64, 48, tmp_path / "empty.png")
    assert OpenPoseJsonDetector().detect(buffer) is None
    assert OpenPoseJsonDetector(person_index=1).detect(buffer) is None


@pytest.mark.parametrize("content", [
    "[]",
    "null",
    '{"people": null}',
    '{"people": [null]}',
    '{"people": [{"pose_keypoints_2d": [null, null, null]}]}',
    '{"people": [{"pose_keypoints_2d": ["a", "b", "c"]}]}',
])
def test_detect_malformed_structure_returns_none(tmp_path, content):
    (tmp_path / "odd_keypoints.json").write_text(content, encoding="utf-8")
    buffer = PixelBuffer.blank(64, 48, tmp_path / "odd.png")
    assert OpenPoseJsonDetector().detect(buffer) is None


def test_detect_nan_keypoint_is_unusable(tmp_path):
    # json 모듈은 NaN 리터럴을 그대로 읽음
    (tmp_path / "nan_keypoints.json").write_text(
        '{"people": [{"pose_keypoints_2d": [NaN, 12, 0.9, 32, 24, 0.9]}]}', encoding="utf-8"
    )
    skeleton = OpenPoseJsonDetector().detect(PixelBuffer.blank(64, 48, tmp_path / "nan.png"))

    assert skeleton.point(Joint.NOSE) is None
    assert skeleton.require(Joint.NECK).location == pytest.approx((0.5, 0.5))
