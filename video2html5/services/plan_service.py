"""
The decision engine: turns a `ProbeResult` into a `TranscodePlan`.

Container, video and audio are decided independently:

- Container: kept ("ok") when the probed general format is supported and no
  other container was requested. Otherwise the `--mkv`/`--mp4` override, or
  the default container.
- Video: copied when the codec is supported and re-encoding is not forced.
  Otherwise re-encoded with the default video codec and options.
- Audio: copied when the codec is supported and re-encoding is not forced.
  Otherwise re-encoded with the default audio codec and options. With
  `--stereo`, tracks of more than two channels are copied untouched.

When all three come out as copy/ok the file is already compatible and the
builder returns `NoOpCompatible` instead of a plan.
"""
from typing import Optional

from loguru import logger

from ..config.audio import STEREO_CHANNELS
from ..config.models import EncoderDefaults, Registry, RunFlags
from ..domain.exceptions import SkipNotice
from ..domain.media import ProbeResult
from ..domain.plan import NoOpCompatible, PlanDecision, StreamAction, TranscodePlan, Verdict
from .classifier_service import classify_with


class PlanBuilder:
    """
    Builds transcode plans from probe results.

    The builder is stateless apart from its inputs, so the same probe result
    always yields the same plan.
    """

    def __init__(self, registry: Registry, defaults: EncoderDefaults, flags: RunFlags):
        self.registry = registry
        self.defaults = defaults
        self.flags = flags

    def build(self, probe: ProbeResult) -> PlanDecision:
        """
        Decides what to do with one file.

        Raises:
            UnknownCodecError: If a probed name is in neither list of its pair.
            SkipNotice: If the container format could not be determined.
        """
        container = self.decide_container(probe)
        logger.info(f"- general: {probe.container} -> {container or 'ok'}")

        if probe.video_profile:
            logger.info(f"- input video profile: {probe.video_profile}")
        video = self.decide_video(probe)
        logger.info(f"- video: {probe.video_codec or 'none'} -> {video}")

        audio = self.decide_audio(probe)
        logger.info(f"- audio: {probe.audio_codec or 'none'} -> {audio}")

        plan = TranscodePlan(container=container, video=video, audio=audio)
        if plan.is_noop:
            return NoOpCompatible(probe.path)
        return plan

    def decide_container(self, probe: ProbeResult) -> Optional[str]:
        """Returns None to keep the current container, else the target extension."""
        if not probe.container:
            raise SkipNotice(probe.path, "could not determine the container format, skipping")

        verdict = classify_with(probe.container, self.registry.containers)
        override = self.flags.override_container
        if verdict is Verdict.SUPPORTED and (
            override is None or override.lower() == probe.extension.lower()
        ):
            return None
        return override or self.defaults.container

    def decide_video(self, probe: ProbeResult) -> StreamAction:
        if not probe.has_video:
            return StreamAction.copy()
        verdict = classify_with(probe.video_codec, self.registry.video_codecs)
        if verdict is Verdict.SUPPORTED and not self.flags.force_video_encode:
            return StreamAction.copy()
        return StreamAction.encode(self.defaults.video_codec, self.defaults.video_options)

    def decide_audio(self, probe: ProbeResult) -> StreamAction:
        if not probe.has_audio:
            return StreamAction.copy()
        # --stereo copies multichannel tracks instead of downmixing them.
        # TODO: re-encode with the default audio codec plus `-ac 2` to really downmix.
        if self.flags.downmix_stereo and probe.audio_channels > STEREO_CHANNELS:
            return StreamAction.copy()
        verdict = classify_with(probe.audio_codec, self.registry.audio_codecs)
        if verdict is Verdict.SUPPORTED and not self.flags.force_audio_encode:
            return StreamAction.copy()
        return StreamAction.encode(self.defaults.audio_codec, self.defaults.audio_options)
