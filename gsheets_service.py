import os
from flask import Flask, request, jsonify
import gspread
import pandas as pd
from gspread_dataframe import get_as_dataframe, set_with_dataframe

from seating import assign_seats, explain_compliance

app = Flask(__name__)


def _load_sheet(sh, title):
    try:
        return sh.worksheet(title)
    except gspread.exceptions.WorksheetNotFound:
        return sh.add_worksheet(title=title, rows=1, cols=1)


def _read_sheet(sh, title, required=True):
    try:
        ws = sh.worksheet(title)
    except gspread.exceptions.WorksheetNotFound:
        if required:
            raise ValueError(f"Worksheet '{title}' not found.")
        return pd.DataFrame()
    return get_as_dataframe(ws, evaluate_formulas=True, header=0).dropna(how="all").fillna("")


def _json_body():
    data = request.get_json(force=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object.")
    return data


def _seed(data):
    seed = data.get("seed")
    if seed is None or seed == "":
        return None
    try:
        return int(seed)
    except (TypeError, ValueError):
        raise ValueError(f"'seed' must be an integer, got {seed!r}.") from None


@app.errorhandler(ValueError)
def _bad_input(exc):
    return jsonify({"error": str(exc)}), 400


@app.route("/solve", methods=["POST"])
def solve_from_json():
    data = _json_body()
    desks_df = pd.DataFrame(data.get("desks", []))
    students_df = pd.DataFrame(data.get("students", []))
    rules_df = pd.DataFrame(data.get("rules", []))

    assigned_df, unplaced_df, meta = assign_seats(
        desks_df, students_df, rules_df, seed=_seed(data), log_func=app.logger.info,
    )

    return jsonify({
        "seed": meta["seed"],
        "assignment": assigned_df.to_dict("records"),
        "unplaced": unplaced_df.to_dict("records"),
        "compliance": meta["report"].to_dict(),
    })


@app.route("/solve-sheet", methods=["POST"])
def solve_from_sheet():
    data = _json_body()
    spreadsheet_id = data.get("spreadsheet_id")
    if not spreadsheet_id:
        raise ValueError("Missing 'spreadsheet_id'.")
    desks_sheet = data.get("desks_sheet", "desks")
    students_sheet = data.get("students_sheet", "students")
    rules_sheet = data.get("rules_sheet", "rules")
    assigned_sheet = data.get("assigned_sheet", "assigned")
    compliance_sheet = data.get("compliance_sheet", "compliance")
    cred_file = data.get("service_account_file", os.environ.get("GOOGLE_APPLICATION_CREDENTIALS", "service_account.json"))

    gc = gspread.service_account(filename=cred_file)
    sh = gc.open_by_key(spreadsheet_id)

    desks_df = _read_sheet(sh, desks_sheet)
    students_df = _read_sheet(sh, students_sheet)
    rules_df = _read_sheet(sh, rules_sheet, required=False)

    assigned_df, unplaced_df, meta = assign_seats(
        desks_df, students_df, rules_df, seed=_seed(data), log_func=app.logger.info,
    )
    diag_df = explain_compliance(meta["rules"], meta["assignment"], meta["roster"])

    assigned_ws = _load_sheet(sh, assigned_sheet)
    assigned_ws.clear()
    set_with_dataframe(assigned_ws, assigned_df)

    compliance_ws = _load_sheet(sh, compliance_sheet)
    compliance_ws.clear()
    set_with_dataframe(compliance_ws, diag_df)

    return jsonify({
        "seed": meta["seed"],
        "filled_desks": int(meta["assignment"].filled_count),
        "unplaced_students": int(len(unplaced_df)),
        "violated_rules": len(meta["report"].violated),
    })


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 8000)))
