"""Unit tests for the blood request fraud pipeline."""
import copy
from datetime import datetime, timedelta, timezone

import pytest

from donorlink.pipeline.contact import calculate_contact_score, is_repeating_pattern
from donorlink.pipeline.frequency import calculate_frequency_score, fetch_request_counts
from donorlink.pipeline.hospital import calculate_hospital_score
from donorlink.pipeline.location import calculate_location_score
from donorlink.pipeline.medical_reason import calculate_medical_reason_score
from donorlink.pipeline.processor import analyze_request, batch_analyze
from donorlink.pipeline.timing import calculate_timing_score
from donorlink.scoring.fraud import calculate_fraud_score, get_risk_tier

from tests.conftest import MUMBAI, MYSORE

NO_HISTORY = {"last_24h": 0, "last_7d": 0, "last_30d": 0}


@pytest.fixture
def request_at(clean_request, daytime):
    """The clean request, due five hours after a mid-afternoon submission."""
    req = copy.deepcopy(clean_request)
    req["required_by"] = (daytime + timedelta(hours=5)).isoformat()
    return req


# === Frequency ===

def test_frequency_no_history():
    assert calculate_frequency_score(NO_HISTORY) == (0, [])


@pytest.mark.parametrize("daily,expected", [(1, 0), (2, 5), (3, 15), (4, 25), (9, 25)])
def test_frequency_daily_tiers(daily, expected):
    score, _ = calculate_frequency_score({"last_24h": daily, "last_7d": daily, "last_30d": daily})
    assert score == expected


def test_four_requests_in_a_day_hit_the_cap():
    score, rules = calculate_frequency_score({"last_24h": 4, "last_7d": 4, "last_30d": 4})
    assert score == 25
    assert any(r.startswith("FREQUENCY_24H") for r in rules)


def test_frequency_windows_are_summed_then_capped():
    # 7d tier (+10) and 30d tier (+8) add up
    score, rules = calculate_frequency_score({"last_24h": 0, "last_7d": 8, "last_30d": 16})
    assert score == 18
    assert len(rules) == 2
    score, _ = calculate_frequency_score({"last_24h": 3, "last_7d": 11, "last_30d": 21})
    assert score == 25


def test_fetch_request_counts(fake_db, daytime):
    for hours_ago in (1, 30, 24 * 10):
        fake_db.add_request(requester_id="r1", created_at=(daytime - timedelta(hours=hours_ago)).isoformat())
    fake_db.add_request(requester_id="someone-else", created_at=daytime.isoformat())
    assert fetch_request_counts("r1", daytime) == {"last_24h": 1, "last_7d": 2, "last_30d": 3}


def test_fetch_request_counts_accepts_naive_now(fake_db):
    naive = datetime(2026, 10, 12, 14, 0, 0)
    stored_at = naive.astimezone(timezone.utc) - timedelta(hours=2)
    fake_db.add_request(requester_id="r1", created_at=stored_at.isoformat())
    assert fetch_request_counts("r1", naive) == {"last_24h": 1, "last_7d": 1, "last_30d": 1}


# === Location ===

def test_location_far_city_mismatch_is_capped(request_at, requester):
    request_at["location"] = copy.deepcopy(MYSORE)
    score, rules = calculate_location_score(request_at, requester)
    assert score == 20
    assert any("LOCATION_DISTANCE" in r for r in rules)
    assert any("LOCATION_CITY_MISMATCH" in r for r in rules)
    assert not any("STATE" in r for r in rules)


def test_location_same_place(request_at, requester):
    assert calculate_location_score(request_at, requester) == (0, [])


def test_location_city_compare_ignores_case(request_at, requester):
    request_at["location"]["city"] = "BANGALORE"
    request_at["location"]["state"] = "karnataka"
    assert calculate_location_score(request_at, requester)[0] == 0


def test_location_skipped_without_registered_location(request_at, requester):
    requester["location"] = None
    request_at["location"] = copy.deepcopy(MUMBAI)
    assert calculate_location_score(request_at, requester) == (0, [])


# === Contact ===

def test_contact_matching_phone_scores_zero(request_at, requester):
    assert calculate_contact_score(request_at, requester) == (0, [])


def test_contact_fabricated_number(request_at, requester):
    request_at["contact_info"]["primary_phone"] = "1111111111"
    score, rules = calculate_contact_score(request_at, requester)
    assert score == 15
    assert len(rules) == 2


def test_contact_shared_doctor_and_hospital_phone(request_at, requester):
    request_at["doctor_info"]["phone"] = request_at["hospital"]["phone"]
    score, rules = calculate_contact_score(request_at, requester)
    assert score == 8
    assert rules[0].startswith("CONTACT_SHARED_PHONE")


def test_repeating_patterns():
    assert is_repeating_pattern("7777777")
    assert is_repeating_pattern("1234567890")
    assert not is_repeating_pattern("9876543210")
    assert not is_repeating_pattern("777777")


# === Timing ===

def test_timing_daytime_reasonable_deadline(request_at, daytime):
    assert calculate_timing_score(request_at, daytime) == (0, [])


def test_timing_late_night(request_at, daytime):
    late = daytime.replace(hour=23, minute=30)
    request_at["required_by"] = (late + timedelta(hours=5)).isoformat()
    score, rules = calculate_timing_score(request_at, late)
    assert score == 5
    assert rules[0].startswith("TIMING_LATE_NIGHT")


def test_timing_too_urgent_and_far_future(request_at, daytime):
    request_at["required_by"] = (daytime + timedelta(hours=1)).isoformat()
    assert calculate_timing_score(request_at, daytime)[0] == 15
    request_at["required_by"] = (daytime + timedelta(days=45)).isoformat()
    assert calculate_timing_score(request_at, daytime)[0] == 10


def test_timing_is_capped(request_at, daytime):
    early = daytime.replace(hour=3)
    request_at["required_by"] = (early + timedelta(minutes=30)).isoformat()
    assert calculate_timing_score(request_at, early)[0] == 15


# === Medical reason ===

def test_reason_generic_and_pleading(request_at):
    request_at["medical_reason"] = "Emergency surgery please help"
    score, rules = calculate_medical_reason_score(request_at)
    assert score == 10
    assert len(rules) == 2


def test_reason_detailed(request_at):
    assert calculate_medical_reason_score(request_at) == (0, [])


def test_reason_long_generic_not_flagged(request_at):
    request_at["medical_reason"] = "Emergency surgery for a ruptured appendix scheduled this evening at 7pm"
    assert calculate_medical_reason_score(request_at)[0] == 0


# === Hospital ===

def test_hospital_generic_name_and_wrong_address(request_at):
    request_at["hospital"]["name"] = "City Hospital"
    request_at["hospital"]["address"] = "Near bus stand"
    score, rules = calculate_hospital_score(request_at)
    assert score == 15
    assert len(rules) == 2


def test_hospital_real(request_at):
    assert calculate_hospital_score(request_at) == (0, [])


# === Scoring ===

def test_fraud_score_factors_skip_zero_scores():
    score, factors, tier = calculate_fraud_score({"frequency": 25, "location": 20, "contact": 0, "timing": 5})
    assert score == 50
    assert factors == [
        {"factor": "High request frequency", "weight": 25},
        {"factor": "Location inconsistency", "weight": 20},
        {"factor": "Unusual timing patterns", "weight": 5},
    ]
    assert tier == "medium"


def test_fraud_score_total_is_capped():
    score, _, tier = calculate_fraud_score({
        "frequency": 25, "location": 20, "contact": 15, "timing": 15, "medical_reason": 10, "hospital": 15,
    })
    assert score == 100
    assert tier == "high"


@pytest.mark.parametrize("score,tier", [(0, "minimal"), (19, "minimal"), (20, "low"), (39, "low"),
                                        (40, "medium"), (69, "medium"), (70, "high"), (100, "high")])
def test_risk_tiers(score, tier):
    assert get_risk_tier(score) == tier


# === Processor ===

def test_clean_request_scores_zero(request_at, requester, daytime):
    result = analyze_request(request_at, requester, counts=NO_HISTORY, now=daytime)
    assert result["score"] == 0
    assert result["factors"] == []
    assert result["risk_tier"] == "minimal"


def test_120km_request_from_matching_phone(request_at, requester, daytime):
    request_at["location"] = copy.deepcopy(MYSORE)
    request_at["hospital"]["address"] = "Irwin Road, Mysore"
    result = analyze_request(request_at, requester, counts=NO_HISTORY, now=daytime)
    assert result["score"] == 20
    assert result["factors"] == [{"factor": "Location inconsistency", "weight": 20}]


def test_score_monotone_in_daily_count(request_at, requester, daytime):
    previous = -1
    for daily in range(0, 8):
        counts = {"last_24h": daily, "last_7d": daily, "last_30d": daily}
        score = analyze_request(request_at, requester, counts=counts, now=daytime)["score"]
        assert score >= previous
        previous = score
    assert previous == 25


def test_score_always_in_range(request_at, requester, daytime):
    night = daytime.replace(hour=2)
    request_at.update({
        "location": copy.deepcopy(MUMBAI),
        "contact_info": {"primary_phone": "0000000000"},
        "medical_reason": "Accident, urgent need please help",
        "required_by": (night + timedelta(minutes=30)).isoformat(),
    })
    request_at["hospital"].update({"name": "Clinic", "address": "Near bus stand", "phone": "0000000000"})
    request_at["doctor_info"]["phone"] = "0000000000"
    counts = {"last_24h": 50, "last_7d": 50, "last_30d": 50}
    result = analyze_request(request_at, requester, counts=counts, now=night)
    assert 0 <= result["score"] <= 100
    assert result["score"] == 100


def test_failure_is_soft(request_at, requester, daytime):
    del request_at["contact_info"]
    result = analyze_request(request_at, requester, counts=NO_HISTORY, now=daytime)
    assert result["score"] == 0
    assert result["factors"] == []
    assert result["risk_tier"] == "low"


def test_counts_read_from_storage_when_missing(fake_db, request_at, requester, daytime):
    for k in range(4):
        fake_db.add_request(requester_id=requester["id"],
                            created_at=(daytime - timedelta(hours=k + 1)).isoformat())
    result = analyze_request(request_at, requester, now=daytime)
    assert result["score"] == 25


def test_batch_analyze(fake_db, request_at, daytime):
    owner = fake_db.add_user(name="Owner", phone="9876543210", role="requester",
                             location=copy.deepcopy(request_at["location"]))
    stored = fake_db.add_request(requester_id=owner["id"], **request_at)
    results = batch_analyze([stored["id"], "missing"], now=daytime)
    assert results[0]["request_id"] == stored["id"]
    assert results[0]["analysis"]["score"] == 0
    assert results[1] == {"request_id": "missing", "error": "Blood request not found"}


def test_batch_analyze_without_now_counts_history(fake_db, clean_request):
    owner = fake_db.add_user(name="Owner", phone="9876543210", role="requester",
                             location=copy.deepcopy(clean_request["location"]))
    now = datetime.now(timezone.utc)
    for k in range(4):
        fake_db.add_request(requester_id=owner["id"], created_at=(now - timedelta(hours=k + 1)).isoformat())
    stored = fake_db.add_request(requester_id=owner["id"], **clean_request)

    analysis = batch_analyze([stored["id"]])[0]["analysis"]
    assert "error" not in analysis
    assert analysis["score"] >= 25
    assert {"factor": "High request frequency", "weight": 25} in analysis["factors"]
