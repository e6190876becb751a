#!/usr/bin/env python3
"""
Offline Prediction Report

Loads a CSV export of game records and prints every prediction for a
user as JSON.

Usage:
    python scripts/run_predictions.py --csv records.csv --user u1 [--game memory_game]
"""
import argparse
import json
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from brain_analytics.application.dtos.dtos import (
    behavior_analysis_to_dto,
    churn_prediction_to_dto,
    difficulty_recommendation_to_dto,
    engagement_prediction_to_dto,
    game_recommendations_to_dto,
    score_prediction_to_dto,
)
from brain_analytics.application.use_cases.performance_predictor import PerformancePredictor
from brain_analytics.domain.exceptions import InvalidInputException
from brain_analytics.infrastructure.data_sources.csv_export import load_csv_store

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def build_report(predictor: PerformancePredictor, user_id: str, game_type: str, difficulty: str) -> dict:
    score = predictor.predict_score(user_id, game_type, difficulty)
    engagement = predictor.predict_engagement(user_id)
    churn = predictor.predict_churn_risk(user_id)
    recommended = predictor.recommend_difficulty(user_id, game_type)

    return {
        "score": score_prediction_to_dto(
            user_id, game_type, difficulty, score, predictor.is_actionable(score)
        ).model_dump(mode="json"),
        "engagement": engagement_prediction_to_dto(
            user_id, engagement, predictor.is_actionable(engagement)
        ).model_dump(mode="json"),
        "churn": churn_prediction_to_dto(
            user_id, churn, predictor.is_actionable(churn)
        ).model_dump(mode="json"),
        "difficulty": difficulty_recommendation_to_dto(
            user_id, game_type, recommended, predictor.is_actionable(recommended)
        ).model_dump(mode="json"),
        "games": game_recommendations_to_dto(
            user_id, predictor.recommend_games(user_id)
        ).model_dump(mode="json"),
        "behavior": behavior_analysis_to_dto(
            predictor.analyze_behavior(user_id)
        ).model_dump(mode="json"),
    }


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Print predictions for a user from a CSV export.")
    parser.add_argument("--csv", required=True, help="CSV export of game records")
    parser.add_argument("--user", required=True, help="User id")
    parser.add_argument("--game", default="memory_game", help="Game for score and difficulty predictions")
    parser.add_argument("--difficulty", default="medium", help="Difficulty for the score prediction")
    args = parser.parse_args(argv)

    store = load_csv_store(args.csv)
    predictor = PerformancePredictor(repository=store)

    try:
        report = build_report(predictor, args.user, args.game, args.difficulty)
    except InvalidInputException as e:
        logger.error(str(e))
        return 2

    print(json.dumps(report, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
