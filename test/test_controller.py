import joblib
import numpy as np

import controller


class ConstantModel:
    def predict(self, X):
        return np.array(["Pull Back"])


def write_gesture_recording(path):
    lines = ["time,accX,accY,accZ,gyrX,gyrY,gyrZ"]
    for i in range(30):
        gyro_y = 2.0 if i < 20 else 0.0
        lines.append(f"{i},{i},0,9.8,0,{gyro_y},0")
    path.write_text("\n".join(lines) + "\n")
    return str(path)


def test_replay_with_local_model(tmp_path):
    model_path = tmp_path / "model.pkl"
    joblib.dump(ConstantModel(), model_path)
    csv_path = write_gesture_recording(tmp_path / "rec.csv")

    args = controller.build_parser().parse_args(
        ["--source", "replay", "--csv", csv_path, "--mode", "both",
         "--window-size", "10", "--overlap-size", "0", "--model", str(model_path)]
    )
    predictor = controller.LocalModelPredictor(args.model)
    pipeline = controller.build_pipeline(args, predictor)
    df = controller.load_recording(args.csv)
    controller.run_samples(pipeline, controller.iter_samples(df))

    assert pipeline.stats()["feature summaries"] == 3
    assert pipeline.stats()["captures emitted"] == 1
    assert predictor.results == ["Pull Back"] * 4


def test_main_replay_prints_summary(tmp_path, capsys):
    model_path = tmp_path / "model.pkl"
    joblib.dump(ConstantModel(), model_path)
    csv_path = write_gesture_recording(tmp_path / "rec.csv")

    code = controller.main(
        ["--source", "replay", "--csv", csv_path, "--model", str(model_path),
         "--min-length", "30", "--log-level", "WARNING"]
    )
    out = capsys.readouterr().out
    assert code == 0
    assert "SESSION SUMMARY" in out
    assert "captures discarded" in out


def test_main_replay_requires_csv():
    assert controller.main(["--source", "replay", "--log-level", "WARNING"]) == 2


def test_keys_only_pressed_when_enabled(monkeypatch):
    pressed = []
    monkeypatch.setattr(controller, "execute_action", pressed.append)
    controller.on_prediction("Left Slip", use_keys=False)
    controller.on_prediction("Unknown", use_keys=True)
    controller.on_prediction("Right Roll", use_keys=True)
    assert pressed == ["Right Roll"]
