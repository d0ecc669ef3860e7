# scripts/backtest.py
"""
CLI script for running a strategy template backtest.
"""

import sys
from datetime import datetime
from pathlib import Path

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

import click
from algoflow.core.backtest_engine import BacktestEngine
from algoflow.core.historical_loader import load_candles_from_csv
from algoflow.models.results import BacktestRequest
from algoflow.strategies.templates import build_workflow
from algoflow.utils.config_loader import get_default_config, load_config
from algoflow.utils.logging_config import setup_logging
from algoflow.utils.time_helpers import datetime_to_ms


def _parse_params(values):
    params = {}
    for item in values:
        key, sep, raw = item.partition('=')
        if not sep:
            raise click.BadParameter(f"Expected key=value, got '{item}'", param_hint='--param')
        params[key.strip()] = float(raw)
    return params


@click.command()
@click.option('--config', '-c', default=None, help='Configuration file path')
@click.option('--template', '-t', 'template_id', required=True, help='Strategy template id (e.g. sma-crossover)')
@click.option('--symbol', '-s', required=True, help='Trading symbol')
@click.option('--param', '-p', 'params', multiple=True, help='Template parameter as key=value (repeatable)')
@click.option('--csv', 'csv_path', default=None, help='Replay candles from a CSV file instead of a broker')
@click.option('--broker', default=None, help='Broker for historical candles')
@click.option('--security-id', default=None, help='Broker security identifier')
@click.option('--exchange-segment', default=None, help='Exchange segment (e.g. NSE_EQ)')
@click.option('--interval', '-i', default=None, help='Candle interval')
@click.option('--start', default=None, help='Range start date (YYYY-MM-DD)')
@click.option('--end', default=None, help='Range end date (YYYY-MM-DD)')
@click.option('--output', '-o', default=None, help='Output directory for results (defaults to backtest.results_dir)')
@click.option('--verbose', '-v', is_flag=True, help='Verbose logging')
def main(config, template_id, symbol, params, csv_path, broker, security_id, exchange_segment,
         interval, start, end, output, verbose):
    """Run a template backtest from the command line."""

    try:
        app_config = load_config(config) if config else get_default_config()

        log_level = "DEBUG" if verbose else app_config.logging.level
        setup_logging(
            level=log_level,
            format_str=app_config.logging.format,
            log_file=app_config.logging.file
        )

        broker = broker or app_config.broker.default_broker
        interval = interval or app_config.backtest.interval

        workflow = build_workflow(
            template_id,
            symbol,
            params=_parse_params(params),
            interval=interval,
            broker=broker,
            security_id=security_id,
            exchange_segment=exchange_segment,
        )

        candles = None
        if csv_path:
            click.echo(f"Loading candles from {csv_path}")
            candles = load_candles_from_csv(csv_path)
            range_start = candles.timestamps[0] if len(candles) else 0
            range_end = candles.timestamps[-1] if len(candles) else 0
        else:
            if not start or not end:
                raise click.UsageError("--start and --end are required without --csv")
            range_start = datetime_to_ms(datetime.fromisoformat(start))
            range_end = datetime_to_ms(datetime.fromisoformat(end))

        request = BacktestRequest(
            workflow=workflow,
            symbol=symbol,
            broker=broker,
            interval=interval,
            start=range_start,
            end=range_end,
            initial_capital=app_config.backtest.initial_capital,
            security_id=security_id,
            exchange_segment=exchange_segment,
        )

        engine = BacktestEngine(
            show_progress=True,
            default_lookback=app_config.backtest.default_lookback,
        )

        click.echo(f"Running {template_id} on {symbol}...")
        result = engine.run(request, candles=candles)

        click.echo("\n" + "=" * 50)
        click.echo("BACKTEST RESULTS")
        click.echo("=" * 50)

        metrics = result.metrics
        click.echo(f"Candles: {result.config.candle_count}")
        click.echo(f"Total Trades: {metrics.total_trades}")
        click.echo(f"Win Rate: {metrics.win_rate * 100:.1f}%")
        click.echo(f"Total PNL: {metrics.total_pnl:.2f}")
        click.echo(f"Max Drawdown: {metrics.max_drawdown * 100:.2f}%")
        click.echo(f"Sharpe: {metrics.sharpe:.3f}" if metrics.sharpe is not None else "Sharpe: N/A")
        click.echo(f"Profit Factor: {metrics.profit_factor:.2f}" if metrics.profit_factor is not None else "Profit Factor: N/A")
        click.echo(f"Final Equity: {result.final_equity:.2f}")

        output_dir = Path(output or app_config.backtest.results_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        json_path = output_dir / f"{template_id}_{symbol}_results.json"
        result.save_to_json(str(json_path))
        click.echo(f"\nResults saved to: {json_path}")

    except click.ClickException:
        raise
    except Exception as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
