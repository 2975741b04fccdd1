"""
Rich 進度條模組

以 rich 顯示去背引擎三個階段的進度
"""

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from smart_cutout.features.cutout import CutoutPhase


PHASE_LABELS: dict[CutoutPhase, str] = {
    CutoutPhase.EXTERIOR: "外部去背",
    CutoutPhase.INTERIOR: "內部色塊清理",
    CutoutPhase.FEATHER: "邊緣羽化",
}


class PhaseProgressBar:
    """
    去背階段進度條

    實例本身可直接作為 CutoutEngine 的 progress_callback::

        with PhaseProgressBar("photo.jpg") as bar:
            CutoutEngine(progress_callback=bar).run(image, parameters)
    """

    def __init__(self, filename: str) -> None:
        self._filename = filename
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=30),
            TaskProgressColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
        )
        self._task_id = self._progress.add_task(filename, total=len(CutoutPhase))
        self._completed: list[CutoutPhase] = []

    def __enter__(self) -> "PhaseProgressBar":
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self._progress.stop()

    def __call__(self, phase: CutoutPhase) -> None:
        self.update(phase)

    def update(self, phase: CutoutPhase) -> None:
        """
        標記階段完成

        Args:
            phase: 完成的階段
        """
        self._completed.append(phase)
        description = f"{self._filename} [green]{PHASE_LABELS[phase]}[/green]"
        self._progress.update(self._task_id, advance=1, description=description)

    @property
    def completed_phases(self) -> tuple[CutoutPhase, ...]:
        """已完成的階段"""
        return tuple(self._completed)
